from django.db import models
from django.conf import settings


class Project(models.Model):
    """
    A pitched idea/project. Hackathon submissions point at one of these;
    ownership (author) and category are all the hackathon core reads.
    """
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="projects"
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=64, blank=True, default="", db_index=True)
    image_url = models.CharField(max_length=1024, blank=True, null=True)
    votes = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title
