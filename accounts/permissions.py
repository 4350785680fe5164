from rest_framework import permissions

class IsOrganizer(permissions.BasePermission):
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_organizer

class IsAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_admin


class IsOrganizerOrAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return request.user.is_authenticated and (request.user.is_organizer or request.user.is_admin)


def is_hackathon_owner(user, hackathon):
    return user.is_authenticated and hackathon.created_by_id == user.id


def can_manage_hackathon(user, hackathon):
    """Owner of the hackathon or a platform admin."""
    return is_hackathon_owner(user, hackathon) or (user.is_authenticated and user.is_admin)
