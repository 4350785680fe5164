from django.db import models
from django.conf import settings

PENDING = 'pending'
CONFIRMED = 'confirmed'
WAITLISTED = 'waitlisted'
REJECTED = 'rejected'
CANCELLED = 'cancelled'

SOLO = 'solo'
TEAM = 'team'


class HackathonRegistration(models.Model):
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (WAITLISTED, 'Waitlisted'),
        (REJECTED, 'Rejected'),
        (CANCELLED, 'Cancelled'),
    ]
    PARTICIPATION_CHOICES = [
        (SOLO, 'Solo'),
        (TEAM, 'Team'),
    ]
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('non-binary', 'Non-binary'),
        ('prefer-not-to-say', 'Prefer not to say'),
        ('', 'Unspecified'),
    ]
    TSHIRT_CHOICES = [
        ('XS', 'XS'), ('S', 'S'), ('M', 'M'), ('L', 'L'), ('XL', 'XL'), ('XXL', 'XXL'), ('', 'Unspecified'),
    ]

    hackathon = models.ForeignKey('hackathon.Hackathon', related_name='registrations', on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='hackathon_registrations', on_delete=models.CASCADE)

    # Basic information
    full_name = models.CharField(max_length=100, null=False, blank=False)
    email = models.EmailField(null=False, blank=False)
    phone_number = models.CharField(max_length=30, blank=True, default='')
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=20, choices=GENDER_CHOICES, blank=True, default='')

    # Professional / academic
    organization_name = models.CharField(max_length=200, null=False, blank=False)
    current_role = models.CharField(max_length=100, null=False, blank=False)
    resume = models.URLField(max_length=500, blank=True, default='')
    linkedin_profile = models.URLField(max_length=500, blank=True, default='')

    skill_set = models.JSONField(default=list, blank=True)
    tech_stack = models.JSONField(default=list, blank=True)
    portfolio = models.URLField(max_length=500, blank=True, default='')
    github_profile = models.URLField(max_length=500, blank=True, default='')
    personal_website = models.URLField(max_length=500, blank=True, default='')
    tshirt_size = models.CharField(max_length=3, choices=TSHIRT_CHOICES, blank=True, default='')

    # Team
    participation_type = models.CharField(max_length=4, choices=PARTICIPATION_CHOICES, default=SOLO)
    team_name = models.CharField(max_length=100, blank=True, default='')

    motivation = models.TextField(blank=True, default='')
    previous_experience = models.TextField(blank=True, default='')
    project_ideas = models.TextField(blank=True, default='')

    # Consent
    agree_to_terms = models.BooleanField(default=False)
    agree_to_photos = models.BooleanField(default=False)
    agree_to_code_of_conduct = models.BooleanField(default=False)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)

    checked_in = models.BooleanField(default=False)
    check_in_time = models.DateTimeField(null=True, blank=True)

    project_submitted = models.BooleanField(default=False)
    project_details = models.JSONField(null=True, blank=True)

    admin_notes = models.TextField(blank=True, default='')
    special_requirements = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['hackathon', 'user'], name='unique_registration_per_user'),
        ]
        indexes = [
            models.Index(fields=['hackathon', 'status'], name='reg_hackathon_status_idx'),
            models.Index(fields=['user', 'status'], name='reg_user_status_idx'),
            models.Index(fields=['email'], name='reg_email_idx'),
            models.Index(fields=['team_name'], name='reg_team_name_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} in {self.hackathon.title}"

    @property
    def team_size(self):
        if self.participation_type == SOLO:
            return 1
        return self.team_members.count() + 1

    @property
    def registration_number(self):
        if not self.pk or not self.created_at:
            return None
        return f"REG{self.created_at:%Y%m}{str(self.pk).zfill(6)[-6:]}"


class TeamMember(models.Model):
    registration = models.ForeignKey(HackathonRegistration, related_name='team_members', on_delete=models.CASCADE)
    name = models.CharField(max_length=100, null=False, blank=False)
    email = models.EmailField(null=False, blank=False)
    role = models.CharField(max_length=100, blank=True, default='')

    class Meta:
        ordering = ['id']

    def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} <{self.email}>"
