# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_USER = "user"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = (
        (ROLE_USER, 'User'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_USER
    )

    avatar = models.CharField(max_length=1024, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)

    # Solana wallet the user signed in with, if any
    wallet = models.CharField(max_length=64, blank=True, null=True)

    @property
    def is_platform_admin(self):
        return self.is_superuser or self.role == self.ROLE_ADMIN

    def __str__(self):
        return self.username
