import json
import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsOrganizerOrAdmin, can_manage_hackathon
from registrations.models import CANCELLED, CONFIRMED, HackathonRegistration
from registrations.stats import aggregate_registrations, registration_rate
from utils.clock import system_clock
from utils.pagination import HackathonPagination
from . import rules
from .models import Hackathon
from .serializers import HackathonSerializer, HackathonWriteSerializer

logger = logging.getLogger(__name__)

SORT_FIELDS = {'start_date', 'end_date', 'registration_deadline', 'created_at', 'registration_count', 'title'}
FEATURED_LIMIT = 6


class HackathonViewMixin:
    clock = system_clock

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['now'] = self.clock.now()
        return context

    def get_hackathon(self, hackathon_id):
        return Hackathon.objects.select_related('created_by').filter(id=hackathon_id).first()

    def hackathon_not_found(self):
        return Response({"error": "Hackathon not found."}, status=status.HTTP_404_NOT_FOUND)


class HackathonListView(HackathonViewMixin, GenericAPIView):
    serializer_class = HackathonSerializer
    pagination_class = HackathonPagination

    def get_permissions(self):
        if self.request.method == 'GET':
            # Allow unauthenticated access for listing hackathons
            return [AllowAny()]
        return [IsAuthenticated(), IsOrganizerOrAdmin()]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Hackathon.objects.none()
        params = self.request.query_params
        user = self.request.user
        queryset = Hackathon.objects.select_related('created_by').prefetch_related('prizes', 'judging_criteria')

        if user.is_authenticated and params.get('my_hackathons') == 'true':
            queryset = queryset.filter(created_by=user)
        elif user.is_authenticated and user.is_admin:
            if params.get('status'):
                queryset = queryset.filter(status=params['status'])
        else:
            queryset = queryset.filter(status=rules.PUBLISHED)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(short_description__icontains=search) | Q(theme__icontains=search)
            )
        theme = params.get('theme')
        if theme and theme != 'all':
            queryset = queryset.filter(theme=theme)
        mode = params.get('mode')
        if mode and mode != 'all':
            queryset = queryset.filter(mode=mode)
        skill_level = params.get('skill_level')
        if skill_level and skill_level != 'all':
            queryset = queryset.filter(skill_level__in=[skill_level, 'all'])
        location = params.get('location')
        if location:
            queryset = queryset.filter(location__icontains=location)

        now = self.clock.now()
        date_range = params.get('date_range')
        if date_range == 'upcoming':
            queryset = queryset.filter(start_date__gt=now)
        elif date_range == 'ongoing':
            queryset = queryset.filter(start_date__lte=now, end_date__gte=now)
        elif date_range == 'completed':
            queryset = queryset.filter(end_date__lt=now)
        elif date_range == 'registration-open':
            queryset = queryset.filter(registration_deadline__gt=now, start_date__gt=now)

        tags = params.get('tags')
        if tags:
            tag_query = Q()
            for tag in [t.strip() for t in tags.split(',') if t.strip()]:
                # JSON containment lookups are not available on SQLite, and its JSON text escapes non-ASCII
                tag_query |= Q(tags__icontains=f'"{tag}"') | Q(tags__icontains=json.dumps(tag))
            queryset = queryset.filter(tag_query)

        sort_by = params.get('sort_by', 'start_date')
        if sort_by not in SORT_FIELDS:
            sort_by = 'start_date'
        prefix = '-' if params.get('sort_order') == 'desc' else ''
        return queryset.order_by(f'{prefix}{sort_by}', 'id')

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('theme', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('mode', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('skill_level', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('location', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('date_range', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=['upcoming', 'ongoing', 'completed', 'registration-open']),
            openapi.Parameter('tags', openapi.IN_QUERY, description="Comma separated tags", type=openapi.TYPE_STRING),
            openapi.Parameter('my_hackathons', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter('sort_by', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('sort_order', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=['asc', 'desc']),
        ],
        responses={200: HackathonSerializer(many=True)},
        operation_description="List hackathons. No authentication required.",
        tags=['hackathons']
    )
    def get(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @swagger_auto_schema(
        request_body=HackathonWriteSerializer,
        responses={
            201: HackathonSerializer,
            400: "Validation error",
            401: "Unauthorized",
            403: "Forbidden"
        },
        operation_description="Create a hackathon (organizers and admins only).",
        tags=['hackathons']
    )
    def post(self, request):
        serializer = HackathonWriteSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        hackathon = serializer.save(created_by=request.user)
        logger.info(f"Hackathon {hackathon.id} created by user {request.user.id} as {hackathon.status}")
        return Response(
            {"message": "Hackathon created successfully", "hackathon": self.get_serializer(hackathon).data},
            status=status.HTTP_201_CREATED
        )


class HackathonDraftView(HackathonViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated, IsOrganizerOrAdmin]
    serializer_class = HackathonSerializer

    @swagger_auto_schema(
        request_body=HackathonWriteSerializer,
        responses={201: HackathonSerializer, 400: "Validation error"},
        operation_description="Save a hackathon as a draft.",
        tags=['hackathons']
    )
    def post(self, request):
        serializer = HackathonWriteSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        hackathon = serializer.save(created_by=request.user, is_draft=True, is_published=False, status=rules.DRAFT)
        logger.info(f"Draft hackathon {hackathon.id} saved by user {request.user.id}")
        return Response(
            {"message": "Draft saved successfully", "hackathon": self.get_serializer(hackathon).data},
            status=status.HTTP_201_CREATED
        )


class FeaturedHackathonsView(HackathonViewMixin, GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = HackathonSerializer

    @swagger_auto_schema(
        responses={200: HackathonSerializer(many=True)},
        operation_description="Published hackathons still open for registration, most popular first.",
        tags=['hackathons']
    )
    def get(self, request):
        now = self.clock.now()
        hackathons = Hackathon.objects.filter(
            status=rules.PUBLISHED,
            start_date__gt=now,
            registration_deadline__gt=now
        ).select_related('created_by').order_by('-registration_count', '-created_at')[:FEATURED_LIMIT]
        return Response(self.get_serializer(hackathons, many=True).data, status=status.HTTP_200_OK)


class UserHackathonsView(HackathonViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HackathonSerializer

    @swagger_auto_schema(
        responses={200: HackathonSerializer(many=True)},
        operation_description="Hackathons created by the authenticated user, in any status.",
        tags=['hackathons']
    )
    def get(self, request):
        hackathons = Hackathon.objects.filter(created_by=request.user).select_related('created_by').order_by('-created_at')
        return Response(self.get_serializer(hackathons, many=True).data, status=status.HTTP_200_OK)


class HackathonRetrieveView(HackathonViewMixin, GenericAPIView):
    serializer_class = HackathonSerializer

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated()]

    @swagger_auto_schema(
        responses={
            200: HackathonSerializer,
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Retrieve a hackathon. Unpublished hackathons are visible to their owner and admins only.",
        tags=['hackathons']
    )
    def get(self, request, hackathon_id):
        hackathon = self.get_hackathon(hackathon_id)
        if not hackathon:
            return self.hackathon_not_found()
        is_manager = can_manage_hackathon(request.user, hackathon)
        if hackathon.status != rules.PUBLISHED and not is_manager:
            return Response({"error": "Not authorized to view this hackathon."}, status=status.HTTP_403_FORBIDDEN)

        data = dict(self.get_serializer(hackathon).data)
        data['registration_stats'] = None
        if is_manager:
            data['registration_stats'] = aggregate_registrations(hackathon.registrations.all())

        data['user_registration'] = None
        if request.user.is_authenticated:
            registration = HackathonRegistration.objects.filter(hackathon=hackathon, user=request.user).first()
            if registration:
                data['user_registration'] = {
                    'id': registration.id,
                    'status': registration.status,
                    'registration_number': registration.registration_number,
                    'team_name': registration.team_name,
                    'participation_type': registration.participation_type,
                }
        return Response(data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=HackathonWriteSerializer,
        responses={
            200: HackathonSerializer,
            400: "Validation error",
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Update a hackathon (owner or admin only).",
        tags=['hackathons']
    )
    def put(self, request, hackathon_id):
        return self._update(request, hackathon_id, partial=False)

    @swagger_auto_schema(
        request_body=HackathonWriteSerializer,
        responses={200: HackathonSerializer},
        operation_description="Partially update a hackathon (owner or admin only).",
        tags=['hackathons']
    )
    def patch(self, request, hackathon_id):
        return self._update(request, hackathon_id, partial=True)

    def _update(self, request, hackathon_id, partial):
        hackathon = self.get_hackathon(hackathon_id)
        if not hackathon:
            return self.hackathon_not_found()
        if not can_manage_hackathon(request.user, hackathon):
            return Response({"error": "Not authorized to update this hackathon."}, status=status.HTTP_403_FORBIDDEN)
        serializer = HackathonWriteSerializer(hackathon, data=request.data, partial=partial, context={'request': request})
        serializer.is_valid(raise_exception=True)
        previous = hackathon.status
        hackathon = serializer.save()
        if hackathon.status != previous:
            logger.info(f"Hackathon {hackathon.id} moved from {previous} to {hackathon.status} by user {request.user.id}")
        return Response(
            {"message": "Hackathon updated successfully", "hackathon": self.get_serializer(hackathon).data},
            status=status.HTTP_200_OK
        )

    @swagger_auto_schema(
        responses={
            200: "Hackathon deleted successfully",
            400: "Hackathon has active registrations",
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Delete a hackathon with no active registrations (owner or admin only).",
        tags=['hackathons']
    )
    def delete(self, request, hackathon_id):
        hackathon = self.get_hackathon(hackathon_id)
        if not hackathon:
            return self.hackathon_not_found()
        if not can_manage_hackathon(request.user, hackathon):
            return Response({"error": "Not authorized to delete this hackathon."}, status=status.HTTP_403_FORBIDDEN)

        active = HackathonRegistration.objects.filter(hackathon=hackathon).exclude(status=CANCELLED).count()
        if active > 0:
            return Response(
                {"error": "Cannot delete hackathon with active registrations. Please cancel all registrations first."},
                status=status.HTTP_400_BAD_REQUEST
            )
        hackathon.delete()
        logger.info(f"Hackathon {hackathon_id} deleted by user {request.user.id}")
        return Response({"message": "Hackathon deleted successfully"}, status=status.HTTP_200_OK)


class PublishHackathonView(HackathonViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HackathonSerializer

    @swagger_auto_schema(
        responses={
            200: HackathonSerializer,
            400: "Hackathon cannot be published",
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Publish a draft hackathon (owner or admin only).",
        tags=['hackathons']
    )
    def post(self, request, hackathon_id):
        hackathon = self.get_hackathon(hackathon_id)
        if not hackathon:
            return self.hackathon_not_found()
        if not can_manage_hackathon(request.user, hackathon):
            return Response({"error": "Not authorized to publish this hackathon."}, status=status.HTTP_403_FORBIDDEN)
        if not rules.can_change_status(hackathon, rules.PUBLISHED):
            return Response(
                {"error": f"A {hackathon.status} hackathon cannot be published."},
                status=status.HTTP_400_BAD_REQUEST
            )

        hackathon.status = rules.PUBLISHED
        hackathon.is_published = True
        hackathon.is_draft = False
        hackathon.save(update_fields=['status', 'is_published', 'is_draft', 'updated_at'])
        logger.info(f"Hackathon {hackathon.id} published by user {request.user.id}")
        return Response(
            {"message": "Hackathon published successfully", "hackathon": self.get_serializer(hackathon).data},
            status=status.HTTP_200_OK
        )


class HackathonStatsView(HackathonViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={
            200: "Registration statistics",
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Registration statistics for a hackathon (owner or admin only).",
        tags=['hackathons']
    )
    def get(self, request, hackathon_id):
        hackathon = self.get_hackathon(hackathon_id)
        if not hackathon:
            return self.hackathon_not_found()
        if not can_manage_hackathon(request.user, hackathon):
            return Response({"error": "Not authorized to view hackathon statistics."}, status=status.HTTP_403_FORBIDDEN)

        stats = aggregate_registrations(hackathon.registrations.all())
        return Response(
            {
                "registration_stats": {
                    "total": stats['total'],
                    "by_status": stats['by_status'],
                    "checked_in": stats['checked_in'],
                    "projects_submitted": stats['projects_submitted'],
                    "by_participation_type": stats['by_participation_type'],
                },
                "skill_stats": stats['skills'],
                "organization_stats": stats['organizations'],
                "registration_rate": registration_rate(stats['by_status'][CONFIRMED], hackathon.max_participants)
            },
            status=status.HTTP_200_OK
        )
