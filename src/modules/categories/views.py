"""Category API views."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.categories.dtos import CategoryInputDTO
from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryNotFound,
    InvalidCategory,
)
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.serializers import CategoryInputSerializer, CategorySerializer
from modules.categories.services import CategoryService


class CategoryViewSet(ViewSet):
    """CRUD over the category tree, routed through ``CategoryService``."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(repository=CategoryDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/categories"""
        categories = self._service.list_categories()
        return Response(CategorySerializer(categories, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/categories/{pk}"""
        try:
            category = self._service.get_category(pk)
        except CategoryNotFound:
            return Response(
                {"detail": "Category not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CategorySerializer(category).data)

    def create(self, request: Request) -> Response:
        """POST /api/categories"""
        dto = self._build_dto(request)
        if isinstance(dto, Response):
            return dto
        try:
            category = self._service.create_category(dto)
        except CategoryNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except CategoryAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(
            CategorySerializer(category).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/categories/{pk}"""
        dto = self._build_dto(request)
        if isinstance(dto, Response):
            return dto
        try:
            category = self._service.update_category(pk, dto)
        except CategoryNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except CategoryAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except InvalidCategory as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(CategorySerializer(category).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/categories/{pk}"""
        try:
            self._service.delete_category(pk)
        except CategoryNotFound:
            return Response(
                {"detail": "Category not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_200_OK)

    @staticmethod
    def _build_dto(request: Request) -> CategoryInputDTO | Response:
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            return CategoryInputDTO(
                name=data["name"],
                description=data.get("description"),
                parent_id=data.get("parentId"),
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
