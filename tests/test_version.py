import pytest

from versionist.core.errors import (
    AmbiguousBumpKind,
    InvalidVersionFormat,
    VersionOverflow,
)
from versionist.domain.version import (
    MAX_COMPONENT,
    BumpKind,
    Part,
    SemanticVersion,
    increment,
    parse_version,
    render,
    select_bump_kind,
    with_build,
)


@pytest.mark.parametrize(
    "text",
    [
        "0.0.0",
        "1.2.3",
        "10.20.30",
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-0.3.7",
        "1.0.0-x.7.z.92",
        "1.0.0-x-y-z.--",
        "1.0.0+20130313144700",
        "1.0.0-beta+exp.sha.5114f85",
        "1.0.0+21AF26D3----117B344092BD",
        f"{MAX_COMPONENT}.0.0",
    ],
)
def test_render_parse_round_trip(text):
    version = parse_version(text)
    assert render(version) == text
    assert parse_version(render(version)) == version


def test_parse_components():
    version = parse_version("1.8.3-nightly.23+extra")
    assert version == SemanticVersion(1, 8, 3, ("nightly", "23"), "extra")
    assert str(version) == "1.8.3-nightly.23+extra"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "1",
        "1.2",
        "1.2.3.4",
        "01.2.3",
        "1.02.3",
        "1.2.03",
        "v1.2.3",
        "1.2.3-",
        "1.2.3-01",
        "1.2.3-alpha..1",
        "1.2.3+",
        "1.2.3+build..1",
        "-1.2.3",
        " 1.2.3",
        "1.2.3\n",
        "1.2.3-beta_1",
    ],
)
def test_parse_rejects_invalid(text):
    with pytest.raises(InvalidVersionFormat) as excinfo:
        parse_version(text)
    assert excinfo.value.field == "current_version"
    assert excinfo.value.code == "invalid_version_format"


def test_parse_rejects_component_above_64_bits():
    with pytest.raises(VersionOverflow):
        parse_version(f"1.{MAX_COMPONENT + 1}.0")


def test_parse_rejects_very_long_component():
    with pytest.raises(VersionOverflow) as excinfo:
        parse_version("1" * 5000 + ".0.0", field="new_version")
    assert excinfo.value.field == "new_version"
    assert excinfo.value.exit_code == 2


def test_parse_names_the_field():
    with pytest.raises(InvalidVersionFormat) as excinfo:
        parse_version("nope", field="new_version")
    assert "new_version" in str(excinfo.value)


@pytest.mark.parametrize(
    "before, kind, expected",
    [
        ("1.1.1", BumpKind.patch(), "1.1.2"),
        ("1.1.1", BumpKind.minor(), "1.2.0"),
        ("1.1.1", BumpKind.major(), "2.0.0"),
        ("1.2.3-rc.1", BumpKind.patch(), "1.2.4"),
        ("1.2.3-rc.1", BumpKind.minor(), "1.3.0"),
        ("1.2.3-rc.1", BumpKind.major(), "2.0.0"),
        ("1.1.1+zlib-1.0.0", BumpKind.major(), "2.0.0"),
        ("1.8.3-nightly.23+extra", BumpKind.patch(), "1.8.4"),
        ("1.0.0", BumpKind.prerelease("beta"), "1.0.0-beta"),
        ("1.0.0-beta", BumpKind.prerelease("beta"), "1.0.0-beta"),
        ("1.0.0-beta.3", BumpKind.prerelease("rc.1"), "1.0.0-rc.1"),
        ("1.3.3-nightly.999", BumpKind.release(), "1.3.3"),
        ("1.8.3-nightly.23+extra", BumpKind.release(), "1.8.3"),
    ],
)
def test_increment(before, kind, expected):
    assert render(increment(parse_version(before), kind)) == expected


def test_increment_does_not_modify_current():
    current = parse_version("1.2.3-rc.1+build")
    increment(current, BumpKind.minor())
    assert render(current) == "1.2.3-rc.1+build"


def test_prerelease_label_is_validated():
    with pytest.raises(InvalidVersionFormat) as excinfo:
        increment(parse_version("1.0.0"), BumpKind.prerelease("not valid"))
    assert excinfo.value.field == "prerelease"


def test_release_without_prerelease_fails():
    with pytest.raises(InvalidVersionFormat) as excinfo:
        increment(parse_version("1.0.0"), BumpKind.release())
    assert excinfo.value.field == "release"


def test_increment_overflow():
    with pytest.raises(VersionOverflow):
        increment(parse_version(f"1.{MAX_COMPONENT}.0"), BumpKind.minor())


def test_explicit_version_is_used_verbatim():
    target = parse_version("3.0.0-rc.1")
    assert increment(parse_version("1.0.0"), BumpKind.explicit(target)) == target


def test_with_build():
    version = with_build(parse_version("1.2.4"), "exp.5")
    assert render(version) == "1.2.4+exp.5"
    assert with_build(version, None) is version
    with pytest.raises(InvalidVersionFormat):
        with_build(version, "bad meta")


@pytest.mark.parametrize(
    "text",
    ["0.0.0", "1.2.3", "1.2.3-alpha", "1.2.3-rc.1+build", "4.0.9-0"],
)
@pytest.mark.parametrize("kind", [BumpKind.major(), BumpKind.minor(), BumpKind.patch()])
def test_increment_is_monotonic(text, kind):
    current = parse_version(text)
    assert increment(current, kind) > current


def test_prerelease_increment_is_monotonic_from_a_prerelease():
    current = parse_version("1.0.0-alpha.1")
    assert increment(current, BumpKind.prerelease("beta")) > current


def test_precedence_ordering():
    ordered = [
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-alpha.beta",
        "1.0.0-beta",
        "1.0.0-beta.2",
        "1.0.0-beta.11",
        "1.0.0-rc.1",
        "1.0.0",
        "1.0.1",
        "1.1.0",
        "2.0.0",
    ]
    versions = [parse_version(text) for text in ordered]
    assert sorted(reversed(versions)) == versions
    for lower, higher in zip(versions, versions[1:]):
        assert lower < higher
        assert higher > lower
        assert lower <= higher


def test_long_numeric_prerelease_identifiers_compare():
    shorter = parse_version("1.0.0-rc." + "9" * 4999)
    longer = parse_version("1.0.0-rc.1" + "0" * 4999)
    assert shorter < longer
    assert longer < parse_version("1.0.0")


def test_build_metadata_ignored_for_precedence():
    left = parse_version("1.0.0+a")
    right = parse_version("1.0.0+b")
    assert left != right
    assert not left < right
    assert left <= right and left >= right


@pytest.mark.parametrize(
    "flags, part",
    [
        ({"major": True}, Part.MAJOR),
        ({"minor": True}, Part.MINOR),
        ({"patch": True}, Part.PATCH),
        ({"prerelease": "beta"}, Part.PRERELEASE),
        ({"release": True}, Part.RELEASE),
        ({"new_version": "2.0.0"}, Part.EXPLICIT),
    ],
)
def test_select_bump_kind(flags, part):
    assert select_bump_kind(**flags).part is part


def test_select_bump_kind_requires_a_selector():
    with pytest.raises(AmbiguousBumpKind) as excinfo:
        select_bump_kind()
    assert excinfo.value.field == "bump"


def test_select_bump_kind_rejects_several_selectors():
    with pytest.raises(AmbiguousBumpKind) as excinfo:
        select_bump_kind(major=True, prerelease="rc.1")
    assert "--major" in str(excinfo.value)
    assert "--prerelease" in str(excinfo.value)


def test_select_bump_kind_validates_new_version():
    with pytest.raises(InvalidVersionFormat) as excinfo:
        select_bump_kind(new_version="2.0")
    assert excinfo.value.field == "new_version"
