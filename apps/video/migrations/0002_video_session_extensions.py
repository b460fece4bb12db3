# Generated manually for video app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('video', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='videosession',
            name='extended_seconds_total',
            field=models.PositiveIntegerField(default=0),
        ),
        migrations.CreateModel(
            name='VideoSessionExtension',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('pending_acceptance', 'Pending acceptance'), ('awaiting_payment', 'Awaiting payment'), ('completed', 'Completed'), ('declined', 'Declined'), ('expired', 'Expired'), ('payment_failed', 'Payment failed')], default='pending_acceptance', max_length=20)),
                ('amount_cents', models.PositiveIntegerField()),
                ('extension_seconds', models.PositiveIntegerField()),
                ('stripe_session_id', models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ('expires_at', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('video_session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='extensions', to='video.videosession')),
                ('initiator', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('responder', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'video_session_extensions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['video_session', 'status'], name='video_ext_session_status_idx'),
                ],
            },
        ),
    ]
