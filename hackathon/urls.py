from django.urls import path
from .views import (
    HackathonListView, HackathonDraftView, FeaturedHackathonsView, UserHackathonsView,
    HackathonRetrieveView, PublishHackathonView, HackathonStatsView
)

urlpatterns = [
    path('', HackathonListView.as_view(), name='hackathon_list'),
    path('draft/', HackathonDraftView.as_view(), name='hackathon_draft'),
    path('featured/', FeaturedHackathonsView.as_view(), name='hackathon_featured'),
    path('user/', UserHackathonsView.as_view(), name='user_hackathons'),
    path('<int:hackathon_id>/', HackathonRetrieveView.as_view(), name='hackathon_retrieve'),
    path('<int:hackathon_id>/publish/', PublishHackathonView.as_view(), name='hackathon_publish'),
    path('<int:hackathon_id>/stats/', HackathonStatsView.as_view(), name='hackathon_stats'),
]
