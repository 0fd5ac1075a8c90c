"""
Django rules-based permissions for tagging
"""
from __future__ import annotations

from typing import Callable, Union

import django.contrib.auth.models
# typing support in rules depends on https://github.com/dfunckt/django-rules/pull/177
import rules  # type: ignore[import]

from .models import Taxonomy

UserType = Union[
    django.contrib.auth.models.User, django.contrib.auth.models.AnonymousUser
]


# Global staff can see and change every taxonomy.
# (Superusers can already do anything)
is_taxonomy_admin: Callable[[UserType], bool] = rules.is_staff


@rules.predicate
def is_taxonomy_owner(user: UserType, taxonomy: Taxonomy | None = None) -> bool:
    """
    Each user owns the taxonomy named after their username.

    When there is no taxonomy yet (e.g. before the first import), any
    authenticated user is allowed; the views only ever act on the taxonomy of
    the requesting user.
    """
    if not user.is_authenticated:
        return False
    if taxonomy is None:
        return True
    return taxonomy.owner == user.get_username()


@rules.predicate
def can_view_taxonomy(user: UserType, taxonomy: Taxonomy | None = None) -> bool:
    """
    Users can browse their own taxonomy; taxonomy admins can browse all of them.
    """
    return is_taxonomy_owner(user, taxonomy) or is_taxonomy_admin(user)


@rules.predicate
def can_change_taxonomy(user: UserType, taxonomy: Taxonomy | None = None) -> bool:
    """
    Users can replace their own taxonomy; taxonomy admins can replace any.
    """
    return is_taxonomy_owner(user, taxonomy) or is_taxonomy_admin(user)


# Taxonomy
rules.add_perm("rt_tagging.add_taxonomy", can_change_taxonomy)
rules.add_perm("rt_tagging.change_taxonomy", can_change_taxonomy)
rules.add_perm("rt_tagging.delete_taxonomy", can_change_taxonomy)
rules.add_perm("rt_tagging.view_taxonomy", can_view_taxonomy)

# Tag records are only ever browsed; they change with their taxonomy
rules.add_perm("rt_tagging.view_tagrecord", can_view_taxonomy)
