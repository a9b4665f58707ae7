import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def score_validators():
    return [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('jobs', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Interview',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, default='')),
                ('scheduled_date', models.DateTimeField(db_index=True)),
                ('duration_minutes', models.PositiveIntegerField(default=60, help_text='Interview duration in minutes (15-480)', validators=[django.core.validators.MinValueValidator(15), django.core.validators.MaxValueValidator(480)])),
                ('mode', models.CharField(choices=[('presential', 'In person'), ('online', 'Online'), ('phone', 'Phone')], max_length=20)),
                ('location', models.CharField(blank=True, default='', help_text='Required for in-person interviews', max_length=255)),
                ('meeting_url', models.URLField(blank=True, default='', help_text='Required for online interviews', max_length=500)),
                ('interviewer_name', models.CharField(blank=True, default='', max_length=150)),
                ('interviewer_email', models.EmailField(blank=True, default='', max_length=254)),
                ('interviewer_phone', models.CharField(blank=True, default='', max_length=30)),
                ('notes', models.TextField(blank=True, default='')),
                ('overall_status', models.CharField(choices=[('pending_approval', 'Pending Approval'), ('scheduled', 'Scheduled'), ('confirmed', 'Confirmed'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('no_show', 'No-Show'), ('rejected', 'Rejected')], db_index=True, default='pending_approval', max_length=20)),
                ('admin_status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('admin_comments', models.TextField(blank=True, default='')),
                ('admin_approved_at', models.DateTimeField(blank=True, null=True)),
                ('candidate_response', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('candidate_response_at', models.DateTimeField(blank=True, null=True)),
                ('candidate_comments', models.TextField(blank=True, default='')),
                ('session_outcome', models.CharField(blank=True, choices=[('', 'None'), ('completed', 'Completed'), ('no_show', 'No-Show'), ('cancelled', 'Cancelled')], default='', max_length=20)),
                ('outcome_set_at', models.DateTimeField(blank=True, null=True)),
                ('outcome_reason', models.TextField(blank=True, default='')),
                ('feedback_technical', models.PositiveSmallIntegerField(blank=True, null=True, validators=score_validators())),
                ('feedback_communication', models.PositiveSmallIntegerField(blank=True, null=True, validators=score_validators())),
                ('feedback_experience', models.PositiveSmallIntegerField(blank=True, null=True, validators=score_validators())),
                ('feedback_overall', models.PositiveSmallIntegerField(blank=True, null=True, validators=score_validators())),
                ('feedback_comments', models.TextField(blank=True, default='')),
                ('feedback_submitted_at', models.DateTimeField(blank=True, null=True)),
                ('feedback_status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('feedback_approved_at', models.DateTimeField(blank=True, null=True)),
                ('feedback_admin_comments', models.TextField(blank=True, default='')),
                ('candidate_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=score_validators())),
                ('candidate_feedback_comments', models.TextField(blank=True, default='')),
                ('candidate_feedback_at', models.DateTimeField(blank=True, null=True)),
                ('reminder_sent_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admin_approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('application', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='interviews', to='jobs.application')),
                ('candidate', models.ForeignKey(help_text='Candidate being interviewed', on_delete=django.db.models.deletion.PROTECT, related_name='candidate_interviews', to=settings.AUTH_USER_MODEL)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='interviews', to='accounts.company')),
                ('created_by', models.ForeignKey(help_text='Company member who proposed the interview', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_interviews', to=settings.AUTH_USER_MODEL)),
                ('feedback_approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('feedback_submitted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('job', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='interviews', to='jobs.job')),
                ('outcome_set_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['company', 'overall_status'], name='interview_company_status_idx'),
                    models.Index(fields=['candidate', 'overall_status'], name='interview_candidate_status_idx'),
                    models.Index(fields=['overall_status', 'scheduled_date'], name='interview_status_date_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('overall_status__in', ['pending_approval', 'scheduled', 'confirmed'])), fields=('application',), name='unique_active_interview_per_application'),
                ],
            },
        ),
    ]
