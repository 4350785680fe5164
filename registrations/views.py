import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import can_manage_hackathon
from hackathon.models import Hackathon
from utils.clock import system_clock
from utils.pagination import MyRegistrationPagination, RegistrationPagination
from .eligibility import RegistrationDraft
from .lifecycle import RegistrationLifecycle
from .models import HackathonRegistration
from .serializers import (
    HackathonRegistrationSerializer, OrganizerRegistrationSerializer, ProjectSubmissionSerializer,
    RegistrationInputSerializer, RegistrationStatusSerializer,
)
from .services import DuplicateRegistrationError, RegistrationService

logger = logging.getLogger(__name__)


def denial_response(decision):
    return Response(
        {"error": decision.message, "reason": decision.reason.value},
        status=status.HTTP_400_BAD_REQUEST
    )


class RegistrationViewMixin:
    clock = system_clock

    def get_lifecycle(self):
        return RegistrationLifecycle()

    def get_registration(self, registration_id):
        return HackathonRegistration.objects.select_related('hackathon', 'user').filter(id=registration_id).first()

    def registration_not_found(self):
        return Response({"error": "Registration not found."}, status=status.HTTP_404_NOT_FOUND)


class HackathonRegisterView(RegistrationViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegistrationInputSerializer

    @swagger_auto_schema(
        request_body=RegistrationInputSerializer,
        responses={
            201: HackathonRegistrationSerializer,
            400: "Validation error or registration not allowed",
            404: "Hackathon not found"
        },
        operation_description="Register the authenticated user for a hackathon.",
        tags=['registrations']
    )
    def post(self, request, hackathon_id):
        try:
            hackathon = Hackathon.objects.get(id=hackathon_id)
        except Hackathon.DoesNotExist:
            return Response({"error": "Hackathon not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        existing = HackathonRegistration.objects.filter(hackathon=hackathon, user=request.user).first()
        draft = RegistrationDraft.from_data(data, participant_id=request.user.id)
        outcome = self.get_lifecycle().register(hackathon, draft, self.clock.now(), existing=existing)
        if not outcome.allowed:
            return denial_response(outcome.decision)

        try:
            registration = RegistrationService.create_registration(hackathon, request.user, outcome, data)
        except DuplicateRegistrationError:
            return denial_response(RegistrationService.DUPLICATE_DENIAL)

        return Response(
            {
                "message": "Registration successful",
                "registration": HackathonRegistrationSerializer(registration).data,
                "registration_number": registration.registration_number
            },
            status=status.HTTP_201_CREATED
        )


class MyRegistrationsView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HackathonRegistrationSerializer
    pagination_class = MyRegistrationPagination

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return HackathonRegistration.objects.none()
        queryset = HackathonRegistration.objects.filter(user=self.request.user).select_related('hackathon', 'user')
        registration_status = self.request.query_params.get('status')
        if registration_status:
            queryset = queryset.filter(status=registration_status)
        return queryset.order_by('-created_at')

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by status", type=openapi.TYPE_STRING),
        ],
        responses={200: HackathonRegistrationSerializer(many=True)},
        operation_description="List the authenticated user's registrations.",
        tags=['registrations']
    )
    def get(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class HackathonRegistrationsView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrganizerRegistrationSerializer
    pagination_class = RegistrationPagination

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('participation_type', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('checked_in', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ],
        responses={
            200: OrganizerRegistrationSerializer(many=True),
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="List registrations for a hackathon (owner or admin only).",
        tags=['registrations']
    )
    def get(self, request, hackathon_id):
        try:
            hackathon = Hackathon.objects.get(id=hackathon_id)
        except Hackathon.DoesNotExist:
            return Response({"error": "Hackathon not found."}, status=status.HTTP_404_NOT_FOUND)
        if not can_manage_hackathon(request.user, hackathon):
            return Response(
                {"error": "Not authorized to view registrations for this hackathon."},
                status=status.HTTP_403_FORBIDDEN
            )

        params = request.query_params
        queryset = HackathonRegistration.objects.filter(hackathon=hackathon).select_related('hackathon', 'user')
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('participation_type'):
            queryset = queryset.filter(participation_type=params['participation_type'])
        if params.get('checked_in') is not None:
            queryset = queryset.filter(checked_in=params['checked_in'] == 'true')
        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(full_name__icontains=search) | Q(email__icontains=search) |
                Q(organization_name__icontains=search) | Q(team_name__icontains=search)
            )

        page = self.paginate_queryset(queryset.order_by('-created_at'))
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class RegistrationDetailView(RegistrationViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegistrationInputSerializer

    @swagger_auto_schema(
        responses={
            200: HackathonRegistrationSerializer,
            403: "Forbidden",
            404: "Registration not found"
        },
        operation_description="Retrieve a registration (registrant, hackathon owner or admin).",
        tags=['registrations']
    )
    def get(self, request, registration_id):
        registration = self.get_registration(registration_id)
        if not registration:
            return self.registration_not_found()
        is_registrant = registration.user_id == request.user.id
        is_manager = can_manage_hackathon(request.user, registration.hackathon)
        if not is_registrant and not is_manager:
            return Response({"error": "Not authorized to view this registration."}, status=status.HTTP_403_FORBIDDEN)
        serializer_class = OrganizerRegistrationSerializer if is_manager else HackathonRegistrationSerializer
        return Response(serializer_class(registration).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=RegistrationInputSerializer,
        responses={
            200: HackathonRegistrationSerializer,
            400: "Validation error or update not allowed",
            403: "Forbidden",
            404: "Registration not found"
        },
        operation_description="Update a registration before the hackathon starts (registrant only).",
        tags=['registrations']
    )
    def put(self, request, registration_id):
        return self._update(request, registration_id, partial=False)

    @swagger_auto_schema(
        request_body=RegistrationInputSerializer,
        responses={200: HackathonRegistrationSerializer},
        operation_description="Partially update a registration (registrant only).",
        tags=['registrations']
    )
    def patch(self, request, registration_id):
        return self._update(request, registration_id, partial=True)

    def _update(self, request, registration_id, partial):
        registration = self.get_registration(registration_id)
        if not registration:
            return self.registration_not_found()
        if registration.user_id != request.user.id:
            return Response({"error": "Not authorized to update this registration."}, status=status.HTTP_403_FORBIDDEN)

        serializer = self.serializer_class(registration, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        merged = {
            'participation_type': data.get('participation_type', registration.participation_type),
            'team_name': data.get('team_name', registration.team_name),
            'team_members': data['team_members'] if 'team_members' in data else [
                {'name': m.name, 'email': m.email, 'role': m.role} for m in registration.team_members.all()
            ],
            'agree_to_terms': data.get('agree_to_terms', registration.agree_to_terms),
            'agree_to_code_of_conduct': data.get('agree_to_code_of_conduct', registration.agree_to_code_of_conduct),
        }
        draft = RegistrationDraft.from_data(merged, participant_id=request.user.id)
        outcome = self.get_lifecycle().update(registration, registration.hackathon, draft, self.clock.now())
        if not outcome.allowed:
            return denial_response(outcome.decision)

        registration = RegistrationService.update_registration(registration, data)
        return Response(
            {"message": "Registration updated successfully", "registration": HackathonRegistrationSerializer(registration).data},
            status=status.HTTP_200_OK
        )


class CancelRegistrationView(RegistrationViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={
            200: HackathonRegistrationSerializer,
            400: "Cancellation not allowed",
            403: "Forbidden",
            404: "Registration not found"
        },
        operation_description="Cancel a registration up to 24 hours before the hackathon starts.",
        tags=['registrations']
    )
    def post(self, request, registration_id):
        registration = self.get_registration(registration_id)
        if not registration:
            return self.registration_not_found()
        if registration.user_id != request.user.id:
            return Response({"error": "Not authorized to cancel this registration."}, status=status.HTTP_403_FORBIDDEN)

        outcome = self.get_lifecycle().cancel(registration, registration.hackathon, self.clock.now())
        if not outcome.allowed:
            return denial_response(outcome.decision)
        RegistrationService.apply(registration, outcome)
        logger.info(f"Registration {registration.id} cancelled by user {request.user.id}")
        return Response(
            {"message": "Registration cancelled successfully", "registration": HackathonRegistrationSerializer(registration).data},
            status=status.HTTP_200_OK
        )


class CheckInView(RegistrationViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={
            200: HackathonRegistrationSerializer,
            400: "Check-in not allowed",
            403: "Forbidden",
            404: "Registration not found"
        },
        operation_description="Check in a participant (hackathon owner or admin only).",
        tags=['registrations']
    )
    def post(self, request, registration_id):
        registration = self.get_registration(registration_id)
        if not registration:
            return self.registration_not_found()
        if not can_manage_hackathon(request.user, registration.hackathon):
            return Response({"error": "Not authorized to check in participants."}, status=status.HTTP_403_FORBIDDEN)

        outcome = self.get_lifecycle().check_in(registration, registration.hackathon, self.clock.now())
        if not outcome.allowed:
            return denial_response(outcome.decision)
        RegistrationService.apply(registration, outcome)
        logger.info(f"Registration {registration.id} checked in by user {request.user.id}")
        return Response(
            {
                "message": "Participant checked in successfully",
                "registration": HackathonRegistrationSerializer(registration).data,
                "check_in_time": registration.check_in_time
            },
            status=status.HTTP_200_OK
        )


class SubmitProjectView(RegistrationViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProjectSubmissionSerializer

    @swagger_auto_schema(
        request_body=ProjectSubmissionSerializer,
        responses={
            200: HackathonRegistrationSerializer,
            400: "Submission not allowed",
            403: "Forbidden",
            404: "Registration not found"
        },
        operation_description="Submit a project once the hackathon has started (registrant only).",
        tags=['registrations']
    )
    def post(self, request, registration_id):
        registration = self.get_registration(registration_id)
        if not registration:
            return self.registration_not_found()
        if registration.user_id != request.user.id:
            return Response(
                {"error": "Not authorized to submit project for this registration."},
                status=status.HTTP_403_FORBIDDEN
            )

        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = self.get_lifecycle().submit_project(
            registration, registration.hackathon, dict(serializer.validated_data), self.clock.now()
        )
        if not outcome.allowed:
            return denial_response(outcome.decision)
        RegistrationService.apply(registration, outcome)
        logger.info(f"Project submitted for registration {registration.id}")
        return Response(
            {
                "message": "Project submitted successfully",
                "registration": HackathonRegistrationSerializer(registration).data,
                "submission_time": registration.project_details['submission_time']
            },
            status=status.HTTP_200_OK
        )


class RegistrationStatusView(RegistrationViewMixin, GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegistrationStatusSerializer

    @swagger_auto_schema(
        request_body=RegistrationStatusSerializer,
        responses={
            200: OrganizerRegistrationSerializer,
            400: "Transition not allowed",
            403: "Forbidden",
            404: "Registration not found"
        },
        operation_description="Change a registration's status (hackathon owner or admin only).",
        tags=['registrations']
    )
    def post(self, request, registration_id):
        registration = self.get_registration(registration_id)
        if not registration:
            return self.registration_not_found()
        if not can_manage_hackathon(request.user, registration.hackathon):
            return Response({"error": "Not authorized to manage this registration."}, status=status.HTTP_403_FORBIDDEN)

        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        target = serializer.validated_data['status']
        previous = registration.status
        outcome = self.get_lifecycle().change_status(registration, target)
        if not outcome.allowed:
            return denial_response(outcome.decision)

        if 'admin_notes' in serializer.validated_data:
            registration.admin_notes = serializer.validated_data['admin_notes']
            registration.save(update_fields=['admin_notes', 'updated_at'])
        RegistrationService.apply(registration, outcome)
        logger.info(f"Registration {registration.id} moved from {previous} to {target} by user {request.user.id}")
        return Response(
            {"message": "Registration status updated", "registration": OrganizerRegistrationSerializer(registration).data},
            status=status.HTTP_200_OK
        )
