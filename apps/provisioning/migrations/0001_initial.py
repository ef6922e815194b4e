# Generated manually for the LumiCloud platform provisioning models

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('customers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Website',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subdomain', models.CharField(max_length=255, unique=True, verbose_name='Subdomain')),
                ('custom_domain', models.CharField(blank=True, max_length=255, null=True, unique=True, verbose_name='Custom Domain')),
                ('aliases', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('DNS_PENDING', 'DNS Pending'), ('SSL_PENDING', 'SSL Pending'), ('ACTIVE', 'Active'), ('SUSPENDED', 'Suspended')], default='PENDING', max_length=20)),
                ('ip_address', models.CharField(blank=True, max_length=64)),
                ('php_version', models.CharField(default='8.1', max_length=10)),
                ('document_root', models.CharField(default='public_html', max_length=255)),
                ('ssl_enabled', models.BooleanField(default=False)),
                ('ssl_force', models.BooleanField(default=False)),
                ('ssl_verified', models.BooleanField(default=False)),
                ('dns_verified', models.BooleanField(default=False)),
                ('disk_usage_mb', models.PositiveIntegerField(default=0)),
                ('bandwidth_usage_mb', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='websites', to='customers.customer')),
            ],
            options={
                'verbose_name': 'Website',
                'verbose_name_plural': 'Websites',
                'db_table': 'websites',
                'ordering': ('-created_at',),
                'indexes': [models.Index(fields=['customer', 'status'], name='idx_websites_customer_status')],
            },
        ),
        migrations.CreateModel(
            name='Database',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=64, unique=True)),
                ('username', models.CharField(max_length=64)),
                ('_password', models.CharField(blank=True, db_column='password', max_length=512)),
                ('host', models.CharField(default='localhost', max_length=255)),
                ('port', models.PositiveIntegerField(default=3306)),
                ('charset', models.CharField(default='utf8mb4', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='databases', to='customers.customer')),
            ],
            options={
                'verbose_name': 'Database',
                'verbose_name_plural': 'Databases',
                'db_table': 'databases',
                'ordering': ('-created_at',),
            },
        ),
    ]
