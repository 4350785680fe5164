import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('hackathon', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='HackathonRegistration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=254)),
                ('phone_number', models.CharField(blank=True, default='', max_length=30)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female'), ('non-binary', 'Non-binary'), ('prefer-not-to-say', 'Prefer not to say'), ('', 'Unspecified')], default='', max_length=20)),
                ('organization_name', models.CharField(max_length=200)),
                ('current_role', models.CharField(max_length=100)),
                ('resume', models.URLField(blank=True, default='', max_length=500)),
                ('linkedin_profile', models.URLField(blank=True, default='', max_length=500)),
                ('skill_set', models.JSONField(blank=True, default=list)),
                ('tech_stack', models.JSONField(blank=True, default=list)),
                ('portfolio', models.URLField(blank=True, default='', max_length=500)),
                ('github_profile', models.URLField(blank=True, default='', max_length=500)),
                ('personal_website', models.URLField(blank=True, default='', max_length=500)),
                ('tshirt_size', models.CharField(blank=True, choices=[('XS', 'XS'), ('S', 'S'), ('M', 'M'), ('L', 'L'), ('XL', 'XL'), ('XXL', 'XXL'), ('', 'Unspecified')], default='', max_length=3)),
                ('participation_type', models.CharField(choices=[('solo', 'Solo'), ('team', 'Team')], default='solo', max_length=4)),
                ('team_name', models.CharField(blank=True, default='', max_length=100)),
                ('motivation', models.TextField(blank=True, default='')),
                ('previous_experience', models.TextField(blank=True, default='')),
                ('project_ideas', models.TextField(blank=True, default='')),
                ('agree_to_terms', models.BooleanField(default=False)),
                ('agree_to_photos', models.BooleanField(default=False)),
                ('agree_to_code_of_conduct', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('waitlisted', 'Waitlisted'), ('rejected', 'Rejected'), ('cancelled', 'Cancelled')], default='pending', max_length=10)),
                ('checked_in', models.BooleanField(default=False)),
                ('check_in_time', models.DateTimeField(blank=True, null=True)),
                ('project_submitted', models.BooleanField(default=False)),
                ('project_details', models.JSONField(blank=True, null=True)),
                ('admin_notes', models.TextField(blank=True, default='')),
                ('special_requirements', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='hackathon.hackathon')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hackathon_registrations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['hackathon', 'status'], name='reg_hackathon_status_idx'),
                    models.Index(fields=['user', 'status'], name='reg_user_status_idx'),
                    models.Index(fields=['email'], name='reg_email_idx'),
                    models.Index(fields=['team_name'], name='reg_team_name_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('hackathon', 'user'), name='unique_registration_per_user'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TeamMember',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=254)),
                ('role', models.CharField(blank=True, default='', max_length=100)),
                ('registration', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='team_members', to='registrations.hackathonregistration')),
            ],
            options={
                'ordering': ['id'],
            },
        ),
    ]
