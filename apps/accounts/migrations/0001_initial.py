# Generated manually for accounts app

import uuid
from django.db import migrations, models


TIER_CHOICES = [
    ('free', 'Free'),
    ('casual', 'Casual'),
    ('dating', 'Dating'),
    ('business', 'Business'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(db_index=True, max_length=255, unique=True)),
                ('display_name', models.CharField(blank=True, max_length=100)),
                ('email_verified', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('membership_tier', models.CharField(choices=TIER_CHOICES, default='free', max_length=20)),
                ('scheduled_tier', models.CharField(blank=True, choices=TIER_CHOICES, help_text='Tier that takes effect at the end of the current billing period', max_length=20, null=True)),
                ('tier_change_at', models.DateTimeField(blank=True, null=True)),
                ('subscription_status', models.CharField(choices=[('none', 'None'), ('active', 'Active'), ('past_due', 'Past due'), ('canceled', 'Canceled')], default='none', max_length=20)),
                ('stripe_customer_id', models.CharField(blank=True, max_length=255, null=True)),
                ('block_count', models.PositiveIntegerField(default=0)),
                ('flagged_for_admin', models.BooleanField(default=False)),
                ('account_status', models.CharField(choices=[('active', 'Active'), ('under_review', 'Under review'), ('banned', 'Banned')], default='active', max_length=20)),
                ('video_meetings_count', models.PositiveIntegerField(default=0)),
                ('first_video_call_at', models.DateTimeField(blank=True, null=True)),
                ('last_video_call_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('last_login', models.DateTimeField(blank=True, null=True)),
                ('gdpr_deleted_at', models.DateTimeField(blank=True, null=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'auth_users',
                'indexes': [
                    models.Index(fields=['email'], name='auth_users_email_idx'),
                    models.Index(fields=['created_at'], name='auth_users_created_idx'),
                    models.Index(fields=['flagged_for_admin'], name='auth_users_flagged_idx'),
                    models.Index(fields=['stripe_customer_id'], name='auth_users_stripe_idx'),
                ],
            },
        ),
    ]
