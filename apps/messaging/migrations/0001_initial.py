# Generated manually for messaging app

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
            name='Message',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('body', models.CharField(max_length=280)),
                ('used_credit', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='messages', to='matches.match')),
                ('sender', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='messages_sent', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'messages',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['match', 'created_at'], name='messages_match_created_idx')],
            },
        ),
        migrations.CreateModel(
            name='DailyMessageCount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('messages_sent', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_message_counts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'message_daily_counts',
                'constraints': [models.UniqueConstraint(fields=('user', 'date'), name='unique_daily_message_count')],
            },
        ),
        migrations.CreateModel(
            name='MatchDailyMessageCount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('messages_sent', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_message_counts', to='matches.match')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='match_daily_message_counts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'match_daily_message_counts',
                'constraints': [models.UniqueConstraint(fields=('match', 'user', 'date'), name='unique_match_daily_count')],
            },
        ),
        migrations.CreateModel(
            name='MessageCredits',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='message_credits', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('credits_remaining', models.PositiveIntegerField(default=0)),
                ('total_purchased', models.PositiveIntegerField(default=0)),
                ('total_spent', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'user_message_credits',
                'verbose_name_plural': 'message credits',
            },
        ),
        migrations.CreateModel(
            name='MessageCreditPurchase',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('pack', models.CharField(choices=[('PACK_SMALL', 'Small pack'), ('PACK_MEDIUM', 'Medium pack'), ('PACK_LARGE', 'Large pack')], max_length=20)),
                ('credits', models.PositiveIntegerField()),
                ('amount_cents', models.PositiveIntegerField()),
                ('pricing_tier', models.CharField(choices=[('STANDARD', 'Standard'), ('REWARD', 'Reward')], default='STANDARD', max_length=10)),
                ('stripe_session_id', models.CharField(max_length=255, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('credited_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='credit_purchases', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'message_credit_purchases',
                'ordering': ['-created_at'],
            },
        ),
    ]
