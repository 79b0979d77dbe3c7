from rest_framework import viewsets, permissions
from .models import Project
from .serializers import ProjectSerializer


class IsAuthorOrReadOnly(permissions.BasePermission):
    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.author_id == request.user.id


class ProjectViewSet(viewsets.ModelViewSet):
    """
    Project store API.
    Permissions:
    - List/Retrieve: Public
    - Create: Authenticated
    - Update/Delete: Author only
    """
    queryset = Project.objects.select_related('author').order_by('-created_at')
    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsAuthorOrReadOnly]

    def get_queryset(self):
        queryset = super().get_queryset()
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)
        author_id = self.request.query_params.get('author')
        if author_id:
            queryset = queryset.filter(author_id=author_id)
        return queryset
