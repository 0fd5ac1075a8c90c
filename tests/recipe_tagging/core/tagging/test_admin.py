"""
Tests for the tagging admin
"""
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory
from django.test.testcases import TestCase

from recipe_tagging.core.tagging.admin import TagRecordAdmin
from recipe_tagging.core.tagging.models import TagRecord, Taxonomy

from .test_models import TestTagTaxonomyMixin

User = get_user_model()


class TestTagRecordAdmin(TestTagTaxonomyMixin, TestCase):
    """
    TagRecords are browsed in the admin with the taxonomy's permissions.
    """

    def setUp(self):
        super().setUp()
        self.model_admin = TagRecordAdmin(TagRecord, admin.site)
        self.staff = User.objects.create(username="staff", email="staff@example.com", is_staff=True)
        self.alice = User.objects.create(username="alice", email="alice@example.com")
        self.bob_tag = TagRecord.objects.create(
            taxonomy=Taxonomy.objects.create(owner="bob"),
            seq_id=1, level=0, disp_name="調味料", full_name="調味料", l="調味料",
        )

    def _request(self, user):
        request = RequestFactory().get("/admin/rt_tagging/tagrecord/")
        request.user = user
        return request

    def test_staff(self):
        request = self._request(self.staff)
        assert self.model_admin.has_view_permission(request)
        assert self.model_admin.has_view_permission(request, self.beef)
        assert self.model_admin.has_view_permission(request, self.bob_tag)

    def test_owner(self):
        request = self._request(self.alice)
        assert self.model_admin.has_view_permission(request)
        assert self.model_admin.has_view_permission(request, self.beef)
        assert not self.model_admin.has_view_permission(request, self.bob_tag)

    def test_anonymous(self):
        request = self._request(AnonymousUser())
        assert not self.model_admin.has_view_permission(request)
        assert not self.model_admin.has_view_permission(request, self.beef)

    def test_read_only(self):
        request = self._request(self.staff)
        assert not self.model_admin.has_add_permission(request)
        assert not self.model_admin.has_change_permission(request, self.beef)
