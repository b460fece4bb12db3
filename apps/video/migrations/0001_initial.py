# Generated manually for video app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('matches', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='VideoSession',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('room_name', models.CharField(blank=True, max_length=255)),
                ('room_url', models.URLField(blank=True, max_length=500)),
                ('status', models.CharField(choices=[('created', 'Created'), ('ended', 'Ended'), ('failed', 'Failed')], default='created', max_length=20)),
                ('max_duration_minutes', models.PositiveIntegerField(default=0)),
                ('duration_seconds', models.PositiveIntegerField(default=0)),
                ('started_at', models.DateTimeField(auto_now_add=True)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='video_sessions', to='matches.match')),
                ('caller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='video_sessions_started', to=settings.AUTH_USER_MODEL)),
                ('callee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='video_sessions_received', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'video_sessions',
                'ordering': ['-started_at'],
                'indexes': [
                    models.Index(fields=['match', 'started_at'], name='video_sessions_match_idx'),
                    models.Index(fields=['status', 'ended_at'], name='video_sessions_ended_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MonthlyVideoCall',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('month_year', models.CharField(help_text='YYYY-MM', max_length=7)),
                ('completed_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='monthly_video_calls', to=settings.AUTH_USER_MODEL)),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('video_session', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='video.videosession')),
            ],
            options={
                'db_table': 'monthly_video_calls',
                'constraints': [models.UniqueConstraint(fields=('user', 'partner', 'month_year'), name='unique_monthly_video_call')],
            },
        ),
        migrations.CreateModel(
            name='RewardStatus',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='reward_status', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('has_active_reward', models.BooleanField(default=False)),
                ('current_month_calls', models.PositiveIntegerField(default=0)),
                ('month_year', models.CharField(max_length=7)),
                ('last_warning_shown_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'reward_status',
                'verbose_name_plural': 'reward statuses',
            },
        ),
    ]
