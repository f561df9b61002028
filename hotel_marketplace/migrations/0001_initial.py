import django.contrib.auth.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

PHONE_VALIDATOR = django.core.validators.RegexValidator('^\\+?[1-9]\\d{0,15}$', 'Please enter a valid phone number')
TIME_VALIDATOR = django.core.validators.RegexValidator('^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$', 'Invalid time format')
RATING_VALIDATORS = [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)]

CURRENCIES = [('USD', 'Usd'), ('EUR', 'Eur'), ('GBP', 'Gbp'), ('INR', 'Inr'), ('CAD', 'Cad'), ('AUD', 'Aud')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('role', models.CharField(choices=[('customer', 'Customer'), ('hotel', 'Hotel'), ('admin', 'Admin')], default='customer', max_length=10)),
                ('is_verified', models.BooleanField(default=False)),
                ('verification_token', models.CharField(blank=True, max_length=64)),
                ('password_reset_token', models.CharField(blank=True, max_length=64)),
                ('password_reset_expires', models.DateTimeField(blank=True, null=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Hotel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(max_length=1000)),
                ('street', models.CharField(max_length=200)),
                ('city', models.CharField(max_length=100)),
                ('state', models.CharField(max_length=100)),
                ('country', models.CharField(max_length=100)),
                ('zip_code', models.CharField(max_length=20)),
                ('latitude', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)])),
                ('longitude', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)])),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('specialties', models.JSONField(blank=True, default=list)),
                ('images', models.JSONField(blank=True, default=list)),
                ('phone', models.CharField(max_length=20, validators=[PHONE_VALIDATOR])),
                ('email', models.EmailField(max_length=254)),
                ('website', models.URLField(blank=True)),
                ('rating_average', models.DecimalField(decimal_places=1, default=0, max_digits=2)),
                ('rating_total_reviews', models.PositiveIntegerField(default=0)),
                ('price_min', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('price_max', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('currency', models.CharField(choices=CURRENCIES, default='INR', max_length=3)),
                ('check_in_time', models.CharField(default='15:00', max_length=5, validators=[TIME_VALIDATOR])),
                ('check_out_time', models.CharField(default='11:00', max_length=5, validators=[TIME_VALIDATOR])),
                ('cancellation_policy', models.TextField(blank=True, max_length=500)),
                ('children_policy', models.TextField(blank=True, max_length=300)),
                ('pets_policy', models.TextField(blank=True, max_length=300)),
                ('is_verified', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('rejected_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='hotel', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_hotels', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [models.Index(fields=['is_verified', 'is_active'], name='hotel_marke_is_veri_3c1f0e_idx')],
            },
        ),
        migrations.CreateModel(
            name='CustomerProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=50)),
                ('last_name', models.CharField(max_length=50)),
                ('phone', models.CharField(max_length=20, validators=[PHONE_VALIDATOR])),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('street', models.CharField(blank=True, max_length=200)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(blank=True, max_length=100)),
                ('country', models.CharField(blank=True, max_length=100)),
                ('zip_code', models.CharField(blank=True, max_length=20)),
                ('notify_email', models.BooleanField(default=True)),
                ('notify_sms', models.BooleanField(default=False)),
                ('search_radius_km', models.PositiveIntegerField(default=10)),
                ('profile_image', models.CharField(blank=True, max_length=255)),
                ('loyalty_points', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='customer_profile', to=settings.AUTH_USER_MODEL)),
                ('favorites', models.ManyToManyField(blank=True, related_name='favorited_by', to='hotel_marketplace.hotel')),
            ],
        ),
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_type', models.CharField(choices=[('Single', 'Single'), ('Double', 'Double'), ('Twin', 'Twin'), ('Triple', 'Triple'), ('Quad', 'Quad'), ('Suite', 'Suite'), ('Presidential Suite', 'Presidential Suite'), ('Deluxe', 'Deluxe'), ('Standard', 'Standard'), ('Economy', 'Economy'), ('Family Room', 'Family Room')], max_length=30)),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(max_length=500)),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('images', models.JSONField(blank=True, default=list)),
                ('size_value', models.PositiveIntegerField(blank=True, null=True)),
                ('size_unit', models.CharField(choices=[('sqft', 'sqft'), ('sqm', 'sqm')], default='sqft', max_length=4)),
                ('bed_configuration', models.JSONField(blank=True, default=list)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('currency', models.CharField(choices=CURRENCIES, default='INR', max_length=3)),
                ('tax_percent', models.DecimalField(decimal_places=2, default=0, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('service_fee', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('capacity_adults', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(10)])),
                ('capacity_children', models.PositiveIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(5)])),
                ('capacity_infants', models.PositiveIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(2)])),
                ('total_rooms', models.PositiveIntegerField()),
                ('status', models.CharField(choices=[('ready', 'Ready'), ('occupied', 'Occupied'), ('maintenance', 'Maintenance'), ('blocked', 'Blocked'), ('cleaning', 'Cleaning')], default='ready', max_length=12)),
                ('floor', models.PositiveIntegerField(blank=True, null=True)),
                ('smoking_allowed', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('is_available', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('hotel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rooms', to='hotel_marketplace.hotel')),
            ],
            options={
                'indexes': [models.Index(fields=['hotel', 'is_active'], name='hotel_marke_hotel_i_8a2d41_idx')],
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reference', models.CharField(editable=False, max_length=32, unique=True)),
                ('check_in', models.DateTimeField()),
                ('check_out', models.DateTimeField()),
                ('adults', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('children', models.PositiveIntegerField(default=0)),
                ('infants', models.PositiveIntegerField(default=0)),
                ('number_of_rooms', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('total_nights', models.PositiveIntegerField(default=1)),
                ('guest_details', models.JSONField(blank=True, default=list)),
                ('contact_email', models.EmailField(max_length=254)),
                ('contact_phone', models.CharField(max_length=20)),
                ('emergency_contact', models.JSONField(blank=True, default=dict)),
                ('room_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('taxes', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('service_fee', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('discount_reason', models.CharField(blank=True, max_length=50)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('currency', models.CharField(choices=CURRENCIES, default='INR', max_length=3)),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('partially_paid', 'Partially Paid'), ('refunded', 'Refunded'), ('failed', 'Failed')], default='pending', max_length=16)),
                ('payment_method', models.CharField(blank=True, choices=[('credit_card', 'Credit Card'), ('debit_card', 'Debit Card'), ('paypal', 'Paypal'), ('stripe', 'Stripe'), ('bank_transfer', 'Bank Transfer')], max_length=16)),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('deposit_paid', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('rejected', 'Rejected'), ('cancelled', 'Cancelled'), ('checked_in', 'Checked In'), ('checked_out', 'Checked Out'), ('completed', 'Completed'), ('no_show', 'No Show')], default='pending', max_length=12)),
                ('special_requests', models.TextField(blank=True, max_length=500)),
                ('additional_requests', models.JSONField(blank=True, default=list)),
                ('is_cancelled', models.BooleanField(default=False)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_by', models.CharField(blank=True, choices=[('customer', 'Customer'), ('hotel', 'Hotel'), ('admin', 'Admin')], max_length=10)),
                ('cancellation_reason', models.TextField(blank=True)),
                ('refund_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('refund_status', models.CharField(blank=True, choices=[('pending', 'Pending'), ('processed', 'Processed'), ('failed', 'Failed'), ('not_applicable', 'Not Applicable')], max_length=16)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('actual_check_in', models.DateTimeField(blank=True, null=True)),
                ('check_in_notes', models.TextField(blank=True)),
                ('actual_check_out', models.DateTimeField(blank=True, null=True)),
                ('check_out_notes', models.TextField(blank=True)),
                ('damage_charges', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='hotel_marketplace.customerprofile')),
                ('hotel', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='hotel_marketplace.hotel')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='hotel_marketplace.room')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer', 'created_at'], name='hotel_marke_custome_5b7e12_idx'),
                    models.Index(fields=['hotel', 'check_in'], name='hotel_marke_hotel_i_c94a07_idx'),
                    models.Index(fields=['room', 'status'], name='hotel_marke_room_id_e13b58_idx'),
                    models.Index(fields=['status', 'check_in'], name='hotel_marke_status_7f2c90_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('check_out__gt', models.F('check_in'))), name='booking_check_out_after_check_in'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('overall', models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)),
                ('cleanliness', models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS)),
                ('service', models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS)),
                ('location', models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS)),
                ('value', models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS)),
                ('amenities', models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS)),
                ('title', models.CharField(max_length=100)),
                ('comment', models.TextField(max_length=1000)),
                ('pros', models.JSONField(blank=True, default=list)),
                ('cons', models.JSONField(blank=True, default=list)),
                ('stay_type', models.CharField(choices=[('Business', 'Business'), ('Leisure', 'Leisure'), ('Family', 'Family'), ('Couple', 'Couple'), ('Solo', 'Solo'), ('Group', 'Group')], max_length=10)),
                ('room_type', models.CharField(max_length=30)),
                ('stay_nights', models.PositiveIntegerField()),
                ('stay_check_in', models.DateTimeField()),
                ('stay_check_out', models.DateTimeField()),
                ('response_message', models.TextField(blank=True, max_length=500)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('is_verified', models.BooleanField(default=False)),
                ('is_approved', models.BooleanField(default=True)),
                ('moderation_notes', models.TextField(blank=True, max_length=300)),
                ('source', models.CharField(choices=[('website', 'Website'), ('mobile_app', 'Mobile App'), ('email', 'Email')], default='website', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('booking', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='review', to='hotel_marketplace.booking')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='hotel_marketplace.customerprofile')),
                ('hotel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='hotel_marketplace.hotel')),
                ('responded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='review_responses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['hotel', 'is_approved', 'created_at'], name='hotel_marke_hotel_i_4d9e6b_idx')],
            },
        ),
        migrations.CreateModel(
            name='Grievance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('grievance_number', models.CharField(editable=False, max_length=32, unique=True)),
                ('subject', models.CharField(max_length=200)),
                ('description', models.TextField(max_length=2000)),
                ('category', models.CharField(choices=[('booking_issue', 'Booking Issue'), ('payment_problem', 'Payment Problem'), ('service_quality', 'Service Quality'), ('cleanliness', 'Cleanliness'), ('staff_behavior', 'Staff Behavior'), ('amenities', 'Amenities'), ('safety_security', 'Safety Security'), ('accessibility', 'Accessibility'), ('noise_complaint', 'Noise Complaint'), ('billing_dispute', 'Billing Dispute'), ('cancellation_refund', 'Cancellation Refund'), ('other', 'Other')], max_length=24)),
                ('subcategory', models.CharField(blank=True, max_length=100)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('urgent', 'Urgent')], default='medium', max_length=8)),
                ('severity', models.CharField(choices=[('minor', 'Minor'), ('moderate', 'Moderate'), ('major', 'Major'), ('critical', 'Critical')], default='moderate', max_length=8)),
                ('status', models.CharField(choices=[('open', 'Open'), ('acknowledged', 'Acknowledged'), ('in_progress', 'In Progress'), ('resolved', 'Resolved'), ('closed', 'Closed'), ('escalated', 'Escalated')], default='open', max_length=12)),
                ('timeline', models.JSONField(blank=True, default=list)),
                ('admin_response', models.TextField(blank=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grievances', to='hotel_marketplace.booking')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='grievances', to='hotel_marketplace.customerprofile')),
                ('hotel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='grievances', to='hotel_marketplace.hotel')),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
    ]
