import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Hackathon',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('short_description', models.CharField(max_length=150)),
                ('detailed_description', models.TextField(blank=True, default='')),
                ('theme', models.CharField(max_length=100)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('registration_deadline', models.DateTimeField()),
                ('location', models.CharField(blank=True, default='', max_length=200)),
                ('venue', models.CharField(blank=True, default='', max_length=200)),
                ('mode', models.CharField(choices=[('online', 'Online'), ('offline', 'Offline'), ('hybrid', 'Hybrid')], default='hybrid', max_length=10)),
                ('team_size_min', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='minimum team size')),
                ('team_size_max', models.PositiveIntegerField(default=4, validators=[django.core.validators.MinValueValidator(1)], verbose_name='maximum team size')),
                ('max_participants', models.PositiveIntegerField(default=100, validators=[django.core.validators.MinValueValidator(1)])),
                ('eligibility', models.TextField(blank=True, default='')),
                ('skill_level', models.CharField(choices=[('beginner', 'Beginner'), ('intermediate', 'Intermediate'), ('advanced', 'Advanced'), ('all', 'All')], default='all', max_length=15)),
                ('total_prize_pool', models.CharField(blank=True, default='', max_length=100)),
                ('resources', models.TextField(blank=True, default='')),
                ('rules', models.TextField(blank=True, default='')),
                ('schedule', models.TextField(blank=True, default='')),
                ('organizer_name', models.CharField(max_length=100)),
                ('organizer_email', models.EmailField(max_length=254)),
                ('organizer_phone', models.CharField(blank=True, default='', max_length=30)),
                ('website', models.URLField(blank=True, default='', max_length=500)),
                ('social_media', models.JSONField(blank=True, default=dict)),
                ('is_published', models.BooleanField(default=False)),
                ('is_draft', models.BooleanField(default=False)),
                ('allow_team_formation', models.BooleanField(default=True)),
                ('require_resume', models.BooleanField(default=False)),
                ('enable_mentorship', models.BooleanField(default=True)),
                ('enable_workshops', models.BooleanField(default=False)),
                ('special_features', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('published', 'Published'), ('ongoing', 'Ongoing'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='draft', max_length=10)),
                ('registration_count', models.PositiveIntegerField(default=0)),
                ('team_count', models.PositiveIntegerField(default=0)),
                ('project_submissions', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hackathons', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['start_date'],
                'indexes': [
                    models.Index(fields=['start_date'], name='hack_start_idx'),
                    models.Index(fields=['registration_deadline'], name='hack_deadline_idx'),
                    models.Index(fields=['status'], name='hack_status_idx'),
                    models.Index(fields=['created_by'], name='hack_owner_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Prize',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.CharField(max_length=50)),
                ('amount', models.CharField(max_length=50)),
                ('description', models.TextField(blank=True, default='')),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prizes', to='hackathon.hackathon')),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='JudgingCriterion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('criterion', models.CharField(max_length=100)),
                ('weight', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='judging_criteria', to='hackathon.hackathon')),
            ],
            options={
                'ordering': ['id'],
                'verbose_name_plural': 'Judging criteria',
            },
        ),
    ]
