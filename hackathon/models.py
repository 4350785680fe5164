from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

# Create your models here.
class Hackathon(models.Model):
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
        ('ongoing', 'Ongoing'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]
    MODE_CHOICES = [
        ('online', 'Online'),
        ('offline', 'Offline'),
        ('hybrid', 'Hybrid'),
    ]
    SKILL_LEVEL_CHOICES = [
        ('beginner', 'Beginner'),
        ('intermediate', 'Intermediate'),
        ('advanced', 'Advanced'),
        ('all', 'All'),
    ]

    # Basic information
    title = models.CharField(max_length=200, null=False, blank=False)
    short_description = models.CharField(max_length=150, null=False, blank=False)
    detailed_description = models.TextField(blank=True, default='')
    theme = models.CharField(max_length=100, null=False, blank=False)
    tags = models.JSONField(default=list, blank=True)

    # Dates and location
    start_date = models.DateTimeField(null=False, blank=False)
    end_date = models.DateTimeField(null=False, blank=False)
    registration_deadline = models.DateTimeField(null=False, blank=False)
    location = models.CharField(max_length=200, blank=True, default='')
    venue = models.CharField(max_length=200, blank=True, default='')
    mode = models.CharField(max_length=10, choices=MODE_CHOICES, default='hybrid')

    # Participation
    team_size_min = models.PositiveIntegerField('minimum team size', default=1, validators=[MinValueValidator(1)])
    team_size_max = models.PositiveIntegerField('maximum team size', default=4, validators=[MinValueValidator(1)])
    max_participants = models.PositiveIntegerField(default=100, validators=[MinValueValidator(1)])
    eligibility = models.TextField(blank=True, default='')
    skill_level = models.CharField(max_length=15, choices=SKILL_LEVEL_CHOICES, default='all')

    total_prize_pool = models.CharField(max_length=100, blank=True, default='')

    resources = models.TextField(blank=True, default='')
    rules = models.TextField(blank=True, default='')
    schedule = models.TextField(blank=True, default='')

    # Contact
    organizer_name = models.CharField(max_length=100, null=False, blank=False)
    organizer_email = models.EmailField(null=False, blank=False)
    organizer_phone = models.CharField(max_length=30, blank=True, default='')
    website = models.URLField(max_length=500, blank=True, default='')
    social_media = models.JSONField(default=dict, blank=True)

    # Settings
    is_published = models.BooleanField(default=False)
    is_draft = models.BooleanField(default=False)
    allow_team_formation = models.BooleanField(default=True)
    require_resume = models.BooleanField(default=False)
    enable_mentorship = models.BooleanField(default=True)
    enable_workshops = models.BooleanField(default=False)
    special_features = models.JSONField(default=list, blank=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='hackathons', on_delete=models.CASCADE)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='draft')

    # Statistics
    registration_count = models.PositiveIntegerField(default=0)
    team_count = models.PositiveIntegerField(default=0)
    project_submissions = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['start_date'], name='hack_start_idx'),
            models.Index(fields=['registration_deadline'], name='hack_deadline_idx'),
            models.Index(fields=['status'], name='hack_status_idx'),
            models.Index(fields=['created_by'], name='hack_owner_idx'),
        ]
        ordering = ['start_date']

    def __str__(self):
        return self.title


class Prize(models.Model):
    hackathon = models.ForeignKey(Hackathon, related_name='prizes', on_delete=models.CASCADE)
    position = models.CharField(max_length=50, null=False, blank=False)
    amount = models.CharField(max_length=50, null=False, blank=False)
    description = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.position} - {self.amount}"


class JudgingCriterion(models.Model):
    hackathon = models.ForeignKey(Hackathon, related_name='judging_criteria', on_delete=models.CASCADE)
    criterion = models.CharField(max_length=100, null=False, blank=False)
    weight = models.PositiveIntegerField(validators=[MinValueValidator(0), MaxValueValidator(100)])

    class Meta:
        ordering = ['id']
        verbose_name_plural = 'Judging criteria'

    def __str__(self):
        return f"{self.criterion} ({self.weight})"
