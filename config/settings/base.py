"""
Django settings for the LumiCloud platform - Base Configuration
Hosting account lifecycle over HestiaCP.
"""

import os
from pathlib import Path
from typing import Any

# ===============================================================================
# CORE DJANGO SETTINGS
# ===============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Application definition
DJANGO_APPS: list[str] = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS: list[str] = [
    'rest_framework',
    'django_q',
]

LOCAL_APPS: list[str] = [
    'apps.common',
    'apps.users',
    'apps.customers',
    'apps.products',
    'apps.provisioning',
    'apps.billing',
    'apps.audit',
    'apps.api',
]

INSTALLED_APPS: list[str] = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE: list[str] = [
    'apps.common.middleware.RequestIDMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'apps.common.middleware.APIRequestLoggingMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'
ASGI_APPLICATION = 'config.asgi.application'

# ===============================================================================
# DATABASE CONFIGURATION
# ===============================================================================

DATABASES: dict[str, dict[str, Any]] = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'lumicloud'),
        'USER': os.environ.get('DB_USER', 'lumicloud'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'development_password'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'CONN_MAX_AGE': 60,  # Database connection pooling
        'OPTIONS': {
            'application_name': 'lumicloud_platform',
        },
    }
}

# ===============================================================================
# AUTHENTICATION & AUTHORIZATION
# ===============================================================================

AUTH_USER_MODEL = 'users.User'

AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {
            'min_length': 12,
        }
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

# ===============================================================================
# INTERNATIONALIZATION & LOCALIZATION
# ===============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'Asia/Jakarta')
USE_I18N = True
USE_TZ = True

# ===============================================================================
# STATIC FILES
# ===============================================================================

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# ===============================================================================
# CACHE CONFIGURATION
# ===============================================================================

# Database cache so task locks are shared between web and django-q workers
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.db.DatabaseCache',
        'LOCATION': 'lumicloud_cache',
        'KEY_PREFIX': 'lumicloud',
    }
}

# ===============================================================================
# SESSION & COOKIE SETTINGS
# ===============================================================================

SESSION_COOKIE_AGE = 86400  # 24 hours
SESSION_COOKIE_HTTPONLY = True

# CSRF settings
CSRF_COOKIE_HTTPONLY = True
CSRF_TRUSTED_ORIGINS: list[str] = [
    origin for origin in os.environ.get('CSRF_TRUSTED_ORIGINS', '').split(',') if origin
]

# Security headers (enhanced in production)
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Proxies allowed to set X-Forwarded-For for activity log IP addresses
IPWARE_TRUSTED_PROXY_LIST: list[str] = [
    proxy for proxy in os.environ.get('IPWARE_TRUSTED_PROXY_LIST', '').split(',') if proxy
]

# ===============================================================================
# DJANGO REST FRAMEWORK
# ===============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'UNAUTHENTICATED_USER': 'django.contrib.auth.models.AnonymousUser',
}

# ===============================================================================
# HESTIACP INTEGRATION 🖥️
# ===============================================================================

HESTIA_HOST = os.environ.get('HESTIA_HOST', '')
HESTIA_PORT = int(os.environ.get('HESTIA_PORT', '8083'))
HESTIA_ADMIN_USER = os.environ.get('HESTIA_ADMIN_USER', 'admin')
HESTIA_ADMIN_PASSWORD = os.environ.get('HESTIA_ADMIN_PASSWORD', '')
HESTIA_ACCESS_KEY_ID = os.environ.get('HESTIA_ACCESS_KEY_ID', '')
HESTIA_SECRET_KEY = os.environ.get('HESTIA_SECRET_KEY', '')

# Panels ship with self-signed certificates; enable once a real one is installed
HESTIA_VERIFY_SSL = os.environ.get('HESTIA_VERIFY_SSL', 'false').lower() == 'true'
HESTIA_REQUEST_TIMEOUT = int(os.environ.get('HESTIA_REQUEST_TIMEOUT', '30'))

# Retries apply to transport failures only, never to panel rejections
HESTIA_MAX_RETRIES = int(os.environ.get('HESTIA_MAX_RETRIES', '3'))
HESTIA_RETRY_BACKOFF_SECONDS = float(os.environ.get('HESTIA_RETRY_BACKOFF_SECONDS', '0.5'))
HESTIA_CALL_DEADLINE_SECONDS = float(os.environ['HESTIA_CALL_DEADLINE_SECONDS']) if os.environ.get(
    'HESTIA_CALL_DEADLINE_SECONDS'
) else None

# ===============================================================================
# WEBSITE PROVISIONING 🌐
# ===============================================================================

PRIMARY_DOMAIN = os.environ.get('PRIMARY_DOMAIN', 'lumicloude.my.id')
WEBSITE_EDGE_IP = os.environ.get('WEBSITE_EDGE_IP', '198.41.192.67')

# ===============================================================================
# SCHEDULER & CRON 🕐
# ===============================================================================

CRON_SECRET = os.environ.get('CRON_SECRET', '')

Q_CLUSTER_BASE = {
    "name": "lumicloud-cluster",
    "timeout": 1800,  # 30 minutes, a scan may walk many customers
    "retry": 3600,  # Must exceed timeout
    "save_limit": 1000,  # Keep last 1000 task results
    "catch_up": False,  # Don't run missed scheduled tasks
    "orm": "default",  # Use the database as broker
}

# Default production configuration (overridden in environment-specific settings)
Q_CLUSTER = {
    **Q_CLUSTER_BASE,
    "workers": 2,
    "recycle": 500,  # Restart workers after 500 tasks
    "sync": False,
}

# ===============================================================================
# ENCRYPTION 🔐
# ===============================================================================

# Fernet key for panel and database passwords (see apps.common.encryption)
ENCRYPTION_KEY = os.environ.get('DJANGO_ENCRYPTION_KEY', '')

# ===============================================================================
# DEFAULT AUTO FIELD
# ===============================================================================

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ===============================================================================
# SECURITY SETTINGS (Base - override in prod.py)
# ===============================================================================

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY')
if not SECRET_KEY:
    # Development fallback - never use this in production
    import warnings
    warnings.warn(
        "🚨 SECURITY WARNING: Using default SECRET_KEY. "
        "Set DJANGO_SECRET_KEY environment variable for production!",
        UserWarning,
        stacklevel=2
    )
    SECRET_KEY = 'django-insecure-dev-key-only-change-in-production-or-tests'  # noqa: S105


def validate_production_secret_key() -> None:
    """Validate SECRET_KEY meets production security requirements"""
    if SECRET_KEY and SECRET_KEY.startswith('django-insecure-'):
        raise ValueError(
            "🔥 CRITICAL SECURITY ERROR: Cannot use insecure SECRET_KEY in production! "
            "Generate a secure key: python -c 'from django.core.management.utils import get_random_secret_key; print(get_random_secret_key())'"
        )
