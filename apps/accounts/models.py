# apps/accounts/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class Company(models.Model):
    """
    Hiring organisation.

    Company-addressed notifications go to the owner's inbox and to
    ``email`` when set.
    """

    name = models.CharField(max_length=200)
    email = models.EmailField(
        blank=True,
        default='',
        help_text='Contact address for company notifications'
    )
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='owned_companies',
        help_text='User who receives notifications addressed to the company'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'Companies'

    def __str__(self):
        return self.name

    @property
    def contact_email(self):
        if self.email:
            return self.email
        return self.owner.email if self.owner_id else ''


class User(AbstractUser):
    """
    Authentication model.
    - Email is primary identifier
    - Role decides which workflow actions the user may take
    """

    ROLE_CANDIDATE = 'candidate'
    ROLE_COMPANY = 'company'
    ROLE_ADMIN = 'admin'

    ROLE_CHOICES = (
        (ROLE_CANDIDATE, 'Candidate'),
        (ROLE_COMPANY, 'Company'),
        (ROLE_ADMIN, 'Admin'),
    )

    email = models.EmailField(unique=True)

    username = models.CharField(max_length=150, unique=True)

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_CANDIDATE,
        db_index=True
    )

    # Set for company members only
    company = models.ForeignKey(
        Company,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members'
    )

    display_name = models.CharField(max_length=150, blank=True, default='')

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    def __str__(self):
        return self.email

    def get_display_name(self):
        return self.display_name or self.get_full_name() or self.username

    @property
    def is_platform_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_staff or self.is_superuser

    @property
    def is_candidate(self):
        return self.role == self.ROLE_CANDIDATE

    def is_member_of(self, company_id):
        """True when the user acts on behalf of the given company."""
        if company_id is None:
            return False
        if self.role == self.ROLE_COMPANY and self.company_id == company_id:
            return True
        return self.owned_companies.filter(pk=company_id).exists()
