# Generated manually for rewards admin purchases

import uuid
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RewardPurchase',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.CharField(db_index=True, max_length=128)),
                ('username', models.CharField(max_length=150)),
                ('reward_name', models.CharField(max_length=200)),
                ('category_name', models.CharField(max_length=100)),
                ('price', models.PositiveIntegerField()),
                ('image', models.CharField(blank=True, default='', max_length=255)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=10)),
                ('refund_state', models.CharField(choices=[('none', 'None'), ('owed', 'Owed'), ('credited', 'Credited')], db_index=True, default='none', max_length=10)),
                ('refunded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('refunded_account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='refunded_purchases', to='accounts.useraccount')),
            ],
            options={
                'db_table': 'reward_purchases',
                'ordering': ['-created_at'],
            },
        ),
    ]
