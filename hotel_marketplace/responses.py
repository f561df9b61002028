from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


def envelope(data=None, message=None, status_code=status.HTTP_200_OK, **extra):
    body = {'success': True}
    if message:
        body['message'] = message
    if data is not None:
        body['data'] = data
    body.update(extra)
    return Response(body, status=status_code)


class EnvelopePagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_pagination(self):
        paginator = self.page.paginator
        return {
            'page': self.page.number,
            'limit': paginator.per_page,
            'total': paginator.count,
            'pages': paginator.num_pages,
            'has_next': self.page.has_next(),
            'has_prev': self.page.has_previous(),
        }

    def get_paginated_response(self, data, **extra):
        return envelope(data, pagination=self.get_pagination(), **extra)
