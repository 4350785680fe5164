from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import HackathonRegistration, TeamMember


class TeamMemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = TeamMember
        fields = ['name', 'email', 'role']

    def validate_email(self, value):
        return value.strip().lower()


class RegistrationHackathonSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    location = serializers.CharField()


class HackathonRegistrationSerializer(serializers.ModelSerializer):
    hackathon = RegistrationHackathonSerializer(read_only=True)
    user = UserSummarySerializer(read_only=True)
    team_members = TeamMemberSerializer(many=True, read_only=True)
    team_size = serializers.IntegerField(read_only=True)
    registration_number = serializers.CharField(read_only=True)

    class Meta:
        model = HackathonRegistration
        fields = [
            'id', 'registration_number', 'hackathon', 'user',
            'full_name', 'email', 'phone_number', 'date_of_birth', 'gender',
            'organization_name', 'current_role', 'resume', 'linkedin_profile',
            'skill_set', 'tech_stack', 'portfolio', 'github_profile', 'personal_website', 'tshirt_size',
            'participation_type', 'team_name', 'team_members', 'team_size',
            'motivation', 'previous_experience', 'project_ideas',
            'agree_to_terms', 'agree_to_photos', 'agree_to_code_of_conduct',
            'status', 'checked_in', 'check_in_time', 'project_submitted', 'project_details',
            'special_requirements', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class OrganizerRegistrationSerializer(HackathonRegistrationSerializer):
    """Adds fields only the hackathon owner and admins may see."""

    class Meta(HackathonRegistrationSerializer.Meta):
        fields = HackathonRegistrationSerializer.Meta.fields + ['admin_notes']
        read_only_fields = fields


class RegistrationInputSerializer(serializers.ModelSerializer):
    """
    Field-level validation of a registration payload.

    Team composition and consent are business rules checked by the
    eligibility module, so they are not enforced here.
    """
    team_members = TeamMemberSerializer(many=True, required=False)
    skill_set = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    tech_stack = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = HackathonRegistration
        fields = [
            'full_name', 'email', 'phone_number', 'date_of_birth', 'gender',
            'organization_name', 'current_role', 'resume', 'linkedin_profile',
            'skill_set', 'tech_stack', 'portfolio', 'github_profile', 'personal_website', 'tshirt_size',
            'participation_type', 'team_name', 'team_members',
            'motivation', 'previous_experience', 'project_ideas',
            'agree_to_terms', 'agree_to_photos', 'agree_to_code_of_conduct',
            'special_requirements'
        ]

    def validate_email(self, value):
        return value.strip().lower()

    def validate_skill_set(self, value):
        return [skill.strip() for skill in value if skill.strip()]


class ProjectSubmissionSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    github_repo = serializers.URLField(required=False, allow_blank=True, default='')
    live_demo = serializers.URLField(required=False, allow_blank=True, default='')
    presentation_link = serializers.URLField(required=False, allow_blank=True, default='')
    video_demo = serializers.URLField(required=False, allow_blank=True, default='')
    technologies = serializers.ListField(child=serializers.CharField(max_length=50), required=False, default=list)


class RegistrationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['pending', 'confirmed', 'waitlisted', 'rejected'])
    admin_notes = serializers.CharField(required=False, allow_blank=True)
