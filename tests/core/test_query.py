"""Tests for estimator.core.query."""

import pytest

from estimator.core.query import CatalogQueryService, filter_entries


class TestFilterEntries:
    def test_no_filters_returns_everything(self, sample_snapshot):
        result = filter_entries(sample_snapshot)
        assert result.total_count == 3
        assert result.applied_filters == {}

    def test_category(self, sample_snapshot):
        result = filter_entries(sample_snapshot, category="Feature")
        assert [e.id for e in result.entries] == ["basic-crud"]
        assert result.applied_filters == {"category": "Feature"}

    def test_tech_stack(self, sample_snapshot):
        result = filter_entries(sample_snapshot, tech_stack="DOTNET")
        assert [e.id for e in result.entries] == ["basic-crud", "auth"]

    def test_tag_membership(self, sample_snapshot):
        result = filter_entries(sample_snapshot, tag="api")
        assert [e.id for e in result.entries] == ["basic-crud"]

    def test_filters_combine(self, sample_snapshot):
        result = filter_entries(sample_snapshot, tech_stack="dotnet", tag="identity")
        assert [e.id for e in result.entries] == ["auth"]
        assert result.applied_filters == {"techStack": "dotnet", "tag": "identity"}

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_filters_ignored(self, sample_snapshot, blank):
        result = filter_entries(sample_snapshot, category=blank, tech_stack=blank, tag=blank)
        assert result.total_count == 3
        assert result.applied_filters == {}

    def test_no_partial_matching(self, sample_snapshot):
        assert filter_entries(sample_snapshot, category="feat").total_count == 0

    def test_to_dict(self, sample_snapshot):
        data = filter_entries(sample_snapshot, category="infrastructure").to_dict()
        assert data == {
            "catalogVersion": "1.0",
            "catalogTimestamp": "2025-01-15T09:30:00Z",
            "entries": [
                {
                    "id": "ci-pipeline",
                    "name": "CI pipeline",
                    "description": "Build, test and publish on every push",
                    "category": "infrastructure",
                    "techStack": None,
                    "tags": ["devops"],
                }
            ],
            "appliedFilters": {"category": "infrastructure"},
            "totalCount": 1,
        }


class TestCatalogQueryService:
    def test_find(self, repository):
        result = CatalogQueryService(repository).find(tag="CRUD")
        assert [e.id for e in result.entries] == ["basic-crud"]

    def test_categories_sorted(self, repository):
        assert CatalogQueryService(repository).categories() == ["feature", "infrastructure", "security"]
