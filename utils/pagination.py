import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100
    results_key = 'results'

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.get_page_size(self.request)
        total_pages = math.ceil(total / limit) if limit else 0
        current_page = self.page.number
        return Response({
            self.results_key: data,
            'pagination': {
                'current_page': current_page,
                'total_pages': total_pages,
                'total': total,
                'has_next_page': self.page.has_next(),
                'has_prev_page': self.page.has_previous(),
                'limit': limit,
            }
        })


class HackathonPagination(StandardResultsPagination):
    page_size = 12
    results_key = 'hackathons'


class RegistrationPagination(StandardResultsPagination):
    page_size = 20
    results_key = 'registrations'


class MyRegistrationPagination(RegistrationPagination):
    page_size = 10
