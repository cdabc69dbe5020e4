"""Tests for release records, metadata extraction, and the object denylist."""

import pytest

from fossa_diag.errors import MissingMetadataError
from fossa_diag.release import (
    HelmRelease,
    ObjectRef,
    ReleaseDescriptor,
    chart_version,
    filter_sensitive,
    format_object_list,
    is_sensitive,
    parse_object_list,
)


@pytest.mark.parametrize(
    "chart, expected",
    [
        ("fossa-core-1.2.3", "1.2.3"),
        ("fossa-core-2.0.0-rc1", "2.0.0"),
        ("fossa-core", ""),
        ("fossa", ""),
        ("", ""),
        ("fossa-core-", ""),
    ],
)
def test_chart_version(chart, expected):
    assert chart_version(chart) == expected


def test_descriptor_from_release():
    release = HelmRelease(name="myrelease", namespace="myns", chart="fossa-core-1.2.3")
    descriptor = ReleaseDescriptor.from_release(release)

    assert descriptor.name == "myrelease"
    assert descriptor.namespace == "myns"
    assert descriptor.chart_version == "1.2.3"


@pytest.mark.parametrize(
    "fields, missing",
    [
        ({"name": "myrelease", "namespace": "", "chart": "fossa-core-1.2.3"}, "namespace"),
        ({"name": "", "namespace": "myns", "chart": "fossa-core-1.2.3"}, "release name"),
        ({"name": "myrelease", "namespace": "myns", "chart": "fossa-core"}, "chart version"),
        ({"name": "myrelease", "namespace": "myns", "chart": "fossacore1"}, "chart version"),
    ],
)
def test_descriptor_requires_every_field(fields, missing):
    with pytest.raises(MissingMetadataError) as excinfo:
        ReleaseDescriptor.from_release(HelmRelease(**fields))
    assert excinfo.value.field == missing
    assert missing in str(excinfo.value)


def test_release_record_keeps_unknown_fields():
    release = HelmRelease.model_validate(
        {"name": "a", "namespace": "b", "chart": "fossa-core-1.0.0", "custom": "x"}
    )
    assert release.record()["custom"] == "x"
    assert release.menu_label() == "a (namespace=b chart=fossa-core-1.0.0)"


def test_object_ref_parse():
    assert ObjectRef.parse("Deployment/core") == ObjectRef(kind="Deployment", name="core")
    assert ObjectRef.parse("  Service/api \n").identifier == "Service/api"
    assert ObjectRef.parse("/") is None
    assert ObjectRef.parse("Service/") is None
    assert ObjectRef.parse("/name") is None
    assert ObjectRef.parse("") is None


def test_parse_object_list_dedupes_and_sorts():
    refs = parse_object_list("Service/b\nDeployment/a\n/\nService/b\n\nConfigMap/z\n")
    assert [r.identifier for r in refs] == ["ConfigMap/z", "Deployment/a", "Service/b"]


def test_denylist_removes_exactly_the_sensitive_configmaps():
    refs = parse_object_list(
        "\n".join(
            [
                "ConfigMap/myrelease-config",
                "ConfigMap/myrelease-scotland-yard",
                "ConfigMap/myrelease-config-extra",
                "ConfigMap/other-config",
                "Secret/myrelease-config",
                "Deployment/myrelease-core",
                "Service/myrelease-core",
            ]
        )
    )
    filtered = filter_sensitive(refs, "myrelease")

    removed = [r.identifier for r in refs if r not in filtered]
    assert removed == ["ConfigMap/myrelease-config", "ConfigMap/myrelease-scotland-yard"]
    assert [r.identifier for r in filtered] == [
        "ConfigMap/myrelease-config-extra",
        "ConfigMap/other-config",
        "Deployment/myrelease-core",
        "Secret/myrelease-config",
        "Service/myrelease-core",
    ]


def test_is_sensitive_depends_on_release_name():
    ref = ObjectRef(kind="ConfigMap", name="prod-config")
    assert is_sensitive(ref, "prod")
    assert not is_sensitive(ref, "staging")


def test_format_object_list():
    refs = [ObjectRef(kind="Service", name="a"), ObjectRef(kind="Deployment", name="b")]
    assert format_object_list(refs) == "Service/a\nDeployment/b\n"
    assert format_object_list([]) == ""
