"""
Tagging permissions
"""
from rest_framework.permissions import DjangoObjectPermissions

from ...models import Taxonomy


class TaxonomyObjectPermissions(DjangoObjectPermissions):
    """
    Maps each REST API methods to its corresponding Taxonomy permission.

    Every tagging view acts on the taxonomy of the requesting user, so all of
    them check Taxonomy permissions.
    """
    perms_map = {
        "GET": ["%(app_label)s.view_%(model_name)s"],
        "OPTIONS": [],
        "HEAD": ["%(app_label)s.view_%(model_name)s"],
        "POST": ["%(app_label)s.add_%(model_name)s"],
        "PUT": ["%(app_label)s.change_%(model_name)s"],
        "PATCH": ["%(app_label)s.change_%(model_name)s"],
        "DELETE": ["%(app_label)s.delete_%(model_name)s"],
    }

    def _queryset(self, view):
        """
        Returns the queryset to use when checking model and object permissions.

        The base class method calls view.get_queryset(), but that method performs database queries, so we override it.
        """
        return Taxonomy.objects
