# ===============================================================================
# WEBSITE API VIEWS 🌐
# ===============================================================================
#
# All endpoints act on the signed-in customer's own websites; the panel
# calls run with the admin identity.
#

import logging
from typing import ClassVar

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import StandardAPIThrottle, activity_context, error_response, success_response, validation_error_response
from apps.common.exceptions import NotFoundError
from apps.customers.models import Customer
from apps.provisioning.website_service import WebsiteProvisioningService

from .serializers import (
    CustomDomainSerializer,
    DocumentRootSerializer,
    PhpVersionSerializer,
    WebsiteCreateSerializer,
    WebsiteSerializer,
)

logger = logging.getLogger(__name__)


def _own_customer(request: Request) -> Customer | None:
    return Customer.objects.filter(email__iexact=request.user.email).first()


class CustomerWebsiteAPIView(APIView):
    """Base view: authenticated customer, standard throttling"""

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]


# ===============================================================================
# WEBSITE CREATION 🏗️
# ===============================================================================

class WebsiteListCreateAPIView(CustomerWebsiteAPIView):
    """
    GET  /api/websites/ → the customer's websites
    POST /api/websites/ → {"name": "myblog", "php_version": "8.1", "enable_ssl": true}
    """

    def get(self, request: Request) -> Response:
        customer = _own_customer(request)
        if customer is None:
            return error_response(NotFoundError("Customer account not found"))
        return success_response(WebsiteSerializer(customer.websites.all(), many=True).data)

    def post(self, request: Request) -> Response:
        serializer = WebsiteCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = WebsiteProvisioningService().create_website(
            request.user.email,
            serializer.validated_data['name'],
            php_version=serializer.validated_data['php_version'],
            enable_ssl=serializer.validated_data['enable_ssl'],
            context=activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        creation = result.unwrap()
        subdomain = creation.website.subdomain
        return success_response(
            creation.to_dict(),
            message=f"Website {subdomain} created successfully! It will be accessible in 1-2 minutes.",
            status_code=status.HTTP_201_CREATED,
        )


class WebsiteDetailAPIView(CustomerWebsiteAPIView):
    """
    GET    /api/websites/<id>/ → website detail
    PATCH  /api/websites/<id>/ → {"php_version": "8.2"}
    DELETE /api/websites/<id>/ → remove from the panel, then locally
    """

    def get(self, request: Request, website_id: int) -> Response:
        customer = _own_customer(request)
        website = customer.websites.filter(pk=website_id).first() if customer else None
        if website is None:
            return error_response(NotFoundError("Website not found"))
        return success_response(WebsiteSerializer(website).data)

    def patch(self, request: Request, website_id: int) -> Response:
        serializer = PhpVersionSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        customer = _own_customer(request)
        if customer is None:
            return error_response(NotFoundError("Customer account not found"))

        result = WebsiteProvisioningService().change_php_version(
            website_id, serializer.validated_data['php_version'], customer, activity_context(request)
        )
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(WebsiteSerializer(result.unwrap()).data, message="Website updated successfully")

    def delete(self, request: Request, website_id: int) -> Response:
        customer = _own_customer(request)
        if customer is None:
            return error_response(NotFoundError("Customer account not found"))

        result = WebsiteProvisioningService().delete_website(website_id, customer, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(message=f"Website {result.unwrap()} deleted successfully")


# ===============================================================================
# CUSTOM DOMAIN 🔗
# ===============================================================================

class CustomDomainAPIView(CustomerWebsiteAPIView):
    """POST /api/websites/custom-domain/ → {"website_id": 1, "custom_domain": "example.com"}"""

    def post(self, request: Request) -> Response:
        serializer = CustomDomainSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = WebsiteProvisioningService().attach_custom_domain(
            request.user.email,
            serializer.validated_data['website_id'],
            serializer.validated_data['custom_domain'],
            activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        data = result.unwrap()
        return success_response(
            data,
            message=f"Custom domain {data['custom_domain']} added. Please configure DNS as shown.",
        )


# ===============================================================================
# SSL 🔒
# ===============================================================================

class WebsiteSSLAPIView(CustomerWebsiteAPIView):
    """
    POST /api/websites/<id>/ssl/ → issue Let's Encrypt certificate and force HTTPS
    PUT  /api/websites/<id>/ssl/ → renew the certificate
    """

    def post(self, request: Request, website_id: int) -> Response:
        customer = _own_customer(request)
        if customer is None:
            return error_response(NotFoundError("Customer account not found"))

        result = WebsiteProvisioningService().enable_ssl(website_id, customer, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(WebsiteSerializer(result.unwrap()).data, message="SSL enabled successfully")

    def put(self, request: Request, website_id: int) -> Response:
        customer = _own_customer(request)
        if customer is None:
            return error_response(NotFoundError("Customer account not found"))

        result = WebsiteProvisioningService().renew_ssl(website_id, customer, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(WebsiteSerializer(result.unwrap()).data, message="SSL certificate renewed")


# ===============================================================================
# DOCUMENT ROOT 📁
# ===============================================================================

class DocumentRootAPIView(CustomerWebsiteAPIView):
    """
    POST   /api/websites/document-root/ → {"directory": "blog", "website_id": 1}
    DELETE /api/websites/document-root/ → back to public_html
    """

    def post(self, request: Request) -> Response:
        serializer = DocumentRootSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = WebsiteProvisioningService().change_document_root(
            request.user.email,
            serializer.validated_data['directory'],
            website_id=serializer.validated_data['website_id'],
            context=activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        website = result.unwrap()
        return success_response(
            {'subdomain': website.subdomain, 'document_root': website.document_root},
            message=f"Document root changed to: {website.document_root}",
        )

    def delete(self, request: Request) -> Response:
        website_id = request.query_params.get('website_id')
        if website_id is not None and not website_id.isdigit():
            return validation_error_response({'website_id': ['A valid integer is required.']})

        result = WebsiteProvisioningService().reset_document_root(
            request.user.email,
            website_id=int(website_id) if website_id else None,
            context=activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        website = result.unwrap()
        return success_response(
            {'subdomain': website.subdomain, 'document_root': website.document_root},
            message=f"Document root reset to default ({website.document_root})",
        )
