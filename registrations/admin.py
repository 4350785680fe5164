from django.contrib import admin
from .models import HackathonRegistration, TeamMember


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    extra = 0


@admin.register(HackathonRegistration)
class HackathonRegistrationAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'hackathon', 'participation_type', 'team_name', 'status', 'checked_in', 'project_submitted', 'created_at']
    list_filter = ['status', 'participation_type', 'checked_in', 'project_submitted', 'hackathon']
    search_fields = ['full_name', 'email', 'organization_name', 'team_name']
    readonly_fields = ['status', 'checked_in', 'check_in_time', 'project_submitted', 'project_details', 'created_at', 'updated_at']
    inlines = [TeamMemberInline]
    fieldsets = (
        ('Participant', {
            'fields': ('hackathon', 'user', 'full_name', 'email', 'phone_number', 'organization_name', 'current_role')
        }),
        ('Team', {
            'fields': ('participation_type', 'team_name')
        }),
        ('Lifecycle', {
            'fields': ('status', 'checked_in', 'check_in_time', 'project_submitted', 'project_details')
        }),
        ('Notes', {
            'fields': ('admin_notes', 'special_requirements')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
