from django.contrib import admin
from .models import Hackathon, Prize, JudgingCriterion


class PrizeInline(admin.TabularInline):
    model = Prize
    extra = 0


class JudgingCriterionInline(admin.TabularInline):
    model = JudgingCriterion
    extra = 0


@admin.register(Hackathon)
class HackathonAdmin(admin.ModelAdmin):
    list_display = ['title', 'theme', 'mode', 'start_date', 'end_date', 'status', 'registration_count', 'created_by']
    list_filter = ['status', 'mode', 'skill_level', 'start_date']
    search_fields = ['title', 'short_description', 'theme', 'location']
    readonly_fields = ['registration_count', 'team_count', 'project_submissions', 'created_at', 'updated_at']
    inlines = [PrizeInline, JudgingCriterionInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'short_description', 'detailed_description', 'theme', 'tags')
        }),
        ('Event Details', {
            'fields': ('start_date', 'end_date', 'registration_deadline', 'location', 'venue', 'mode')
        }),
        ('Participation', {
            'fields': ('team_size_min', 'team_size_max', 'max_participants', 'eligibility', 'skill_level')
        }),
        ('Settings', {
            'fields': ('status', 'is_published', 'is_draft', 'created_by')
        }),
        ('Counters', {
            'fields': ('registration_count', 'team_count', 'project_submissions'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
