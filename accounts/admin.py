from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['username', 'email', 'is_participant', 'is_organizer', 'is_admin', 'is_active', 'date_joined']
    list_filter = ['is_organizer', 'is_admin', 'is_active']
    search_fields = ['username', 'email', 'first_name', 'last_name']
    readonly_fields = ['date_joined', 'last_login']
    exclude = ['password']
