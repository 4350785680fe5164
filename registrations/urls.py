from django.urls import path
from .views import (
    HackathonRegisterView, HackathonRegistrationsView, MyRegistrationsView, RegistrationDetailView,
    CancelRegistrationView, CheckInView, SubmitProjectView, RegistrationStatusView
)

urlpatterns = [
    path('registrations/my/', MyRegistrationsView.as_view(), name='my_registrations'),
    path('registrations/<int:registration_id>/', RegistrationDetailView.as_view(), name='registration_detail'),
    path('registrations/<int:registration_id>/cancel/', CancelRegistrationView.as_view(), name='registration_cancel'),
    path('registrations/<int:registration_id>/checkin/', CheckInView.as_view(), name='registration_checkin'),
    path('registrations/<int:registration_id>/submit/', SubmitProjectView.as_view(), name='registration_submit'),
    path('registrations/<int:registration_id>/status/', RegistrationStatusView.as_view(), name='registration_status'),
    path('<int:hackathon_id>/register/', HackathonRegisterView.as_view(), name='hackathon_register'),
    path('<int:hackathon_id>/registrations/', HackathonRegistrationsView.as_view(), name='hackathon_registrations'),
]
