"""Tests for ComponentDescriptor."""

from dataclasses import replace

from fwkgo.utils.component.descriptor import ComponentDescriptor, platform_display_name


def test_target_name_single_platform(widgets):
    assert widgets.target_name == "Widgets"


def test_target_name_multi_platform(widgets):
    assert replace(widgets, available_platforms=("ios", "tvos")).target_name == "Widgets-iOS"
    assert replace(widgets, platform="tvos", available_platforms=("ios", "tvos")).target_name == "Widgets-tvOS"


def test_platform_display_name_falls_back_to_input():
    assert platform_display_name("OSX") == "macOS"
    assert platform_display_name("linux") == "linux"


def test_license_path_default(widgets):
    assert widgets.license_path == "LICENSE"
    assert replace(widgets, license_file="COPYING").license_path == "COPYING"


def test_consumers_filter_subcomponents_by_platform(widgets):
    inherit = ComponentDescriptor(name="Core", available_platforms=())
    ios_only = ComponentDescriptor(name="Touch", available_platforms=("iOS",))
    mac_only = ComponentDescriptor(name="AppKit", available_platforms=("osx",))
    nested = replace(inherit, subcomponents=(mac_only,))
    component = replace(widgets, subcomponents=(nested, ios_only))

    assert [c.name for c in component.consumers()] == ["Widgets", "Core", "Touch"]
    assert [c.name for c in component.consumers("osx")] == ["Widgets", "Core", "AppKit"]


def test_resource_bundle_names_from_bundles_and_bundle_resources(widgets):
    core = ComponentDescriptor(
        name="Core",
        available_platforms=(),
        resources=("Core/Core.bundle/", "Core/data.json"),
        resource_bundles={"WidgetsAssets": ("x",)},
    )
    component = replace(
        widgets,
        resources=("Assets/Extra.bundle", "Assets/bundle"),
        resource_bundles={"WidgetsAssets": ("Assets/*",)},
        subcomponents=(core,),
    )

    assert component.resource_bundle_names() == ["WidgetsAssets", "Extra", "Core"]


def test_patterns_are_deduplicated_in_order(widgets):
    core = ComponentDescriptor(
        name="Core",
        available_platforms=(),
        public_headers=("Core/*.h", "Classes/*.h"),
        resources=("a.png",),
    )
    component = replace(widgets, resources=("a.png", "b.png"), subcomponents=(core,))

    assert component.header_patterns() == ["Classes/*.h", "Core/*.h"]
    assert component.resource_patterns() == ["a.png", "b.png"]


def test_vendored_artifacts_list_framework_binaries_first(widgets):
    core = ComponentDescriptor(
        name="Core",
        available_platforms=(),
        vendored_libraries=("Vendor/libcore.a",),
        vendored_frameworks=("Vendor/Core.framework/",),
    )
    component = replace(
        widgets,
        vendored_libraries=("Vendor/libthird.a",),
        vendored_frameworks=("Vendor/Third.framework",),
        subcomponents=(core,),
    )

    assert component.vendored_artifacts() == [
        "Vendor/Third.framework/Third",
        "Vendor/Core.framework/Core",
        "Vendor/libthird.a",
        "Vendor/libcore.a",
    ]
