import unittest

from jimeng_backend.models.catalog_models import EnumOption, RawOption, SliderOption
from jimeng_backend.services.catalog_parser import image_model_id, parse_site, video_model_id
from jimeng_backend.services.errors import ConfigEmptyError
from jimeng_backend.tests.fixtures import INTL_IMAGE_MODELS, VIDEO_MODELS, raw_image_model, raw_video_model


class TestImageModelIds(unittest.TestCase):
    def test_static_table_wins_over_name(self):
        # name says 4.0, but the vendor key is a known 4.5 key
        self.assertEqual(image_model_id("high_aes_general_v40l", "Image 4.0"), "jimeng-4.5")
        self.assertEqual(image_model_id("dreamina_image_lib_1", "whatever"), "nanobananapro")
        self.assertEqual(image_model_id("text2img_xl_sft", ""), "jimeng-xl-pro")

    def test_name_markers_in_priority_order(self):
        self.assertEqual(image_model_id("unknown_a", "Image 4.1 beta"), "jimeng-4.1")
        self.assertEqual(image_model_id("unknown_b", "图片 4.5"), "jimeng-4.5")
        self.assertEqual(image_model_id("unknown_c", "Image 2.0 Pro"), "jimeng-2.1")
        self.assertEqual(image_model_id("unknown_d", "Image 2.0"), "jimeng-2.0")
        self.assertEqual(image_model_id("unknown_e", "Nano BANANA Pro"), "nanobananapro")
        self.assertEqual(image_model_id("unknown_f", "Nano Banana"), "nanobanana")

    def test_fallback_strips_suffix_and_prefix(self):
        self.assertEqual(image_model_id("high_aes_general_v50:general_v5.0", "Seedream"), "jimeng-v50")
        self.assertEqual(image_model_id("other_model", "Seedream"), "other_model")


class TestVideoModelIds(unittest.TestCase):
    def test_specific_markers_first(self):
        self.assertEqual(video_model_id("k1", "Video 3.0 Pro"), "video-3.0-pro")
        self.assertEqual(video_model_id("k2", "Video 3.0 Fast"), "video-3.0-fast")
        self.assertEqual(video_model_id("k3", "Video 3.0"), "video-3.0")
        self.assertEqual(video_model_id("k4", "视频 3.0 Pro"), "video-3.0-pro")
        self.assertEqual(video_model_id("k5", "视频 3.0"), "video-3.0")
        self.assertEqual(video_model_id("k6", "Video S2.0 Pro"), "video-s2.0-pro")
        self.assertEqual(video_model_id("k7", "Sora 2"), "sora-2")
        self.assertEqual(video_model_id("k8", "Veo 3.1"), "veo-3.1")
        self.assertEqual(video_model_id("k9", "Veo3"), "veo-3")

    def test_fallback_strips_vendor_prefixes(self):
        self.assertEqual(video_model_id("dreamina_ic_generate_video_model_vgfm_lite", "Lite"), "vgfm-lite")
        self.assertEqual(video_model_id("dreamina_seedance_pro", "Seedance"), "seedance-pro")


class TestParseSite(unittest.TestCase):
    def test_parse_builds_consistent_catalog(self):
        catalog = parse_site("US", INTL_IMAGE_MODELS, VIDEO_MODELS, "2026-01-01T00:00:00Z")
        self.assertEqual(
            catalog.image_model_ids,
            ["jimeng-4.1", "jimeng-4.0", "jimeng-3.0", "nanobanana", "nanobananapro"],
        )
        self.assertEqual(catalog.last_updated, "2026-01-01T00:00:00Z")
        entry = catalog.image_models["jimeng-4.1"]
        self.assertEqual(entry.supported_resolutions, ("2k", "4k"))
        self.assertEqual(set(entry.resolution_table.keys()), set(entry.supported_resolutions))
        self.assertEqual(entry.size_for("2k", "16:9").width, 1664)
        self.assertEqual(catalog.video_model_ids, ["video-3.0-pro", "video-3.0"])

    def test_id_mapping_is_bijective(self):
        models = INTL_IMAGE_MODELS + [
            raw_image_model("high_aes_general_v30l_art:general_v3.0_18b", "Image 3.1"),
            raw_image_model("high_aes_general_v30l_art_fangzhou:general_v3.0_18b", "Image 3.1 Art"),
        ]
        with self.assertLogs("catalog_parser", level="WARNING"):
            catalog = parse_site("HK", models, [])
        # later entries replace earlier ones, and the replaced key no longer maps back
        self.assertEqual(catalog.vendor_key_of["jimeng-3.1"], "high_aes_general_v30l_art_fangzhou:general_v3.0_18b")
        self.assertEqual(catalog.image_models["jimeng-3.1"].display_name, "Image 3.1 Art")
        self.assertNotIn("high_aes_general_v30l_art:general_v3.0_18b", catalog.model_id_of)
        self.assertEqual(catalog.image_model_ids.count("jimeng-3.1"), 1)
        vendor_keys = list(catalog.vendor_key_of.values())
        self.assertEqual(len(vendor_keys), len(set(vendor_keys)))
        for model_id, vendor_key in catalog.vendor_key_of.items():
            self.assertEqual(catalog.model_id_of[vendor_key], model_id)
            self.assertEqual(catalog.image_models[model_id].vendor_key, vendor_key)

    def test_unknown_ratio_codes_are_dropped(self):
        model = raw_image_model("high_aes_general_v41", "Image 4.1", {"2k": [(1, 2048, 2048), (42, 10, 10)]})
        with self.assertLogs("catalog_parser", level="WARNING"):
            catalog = parse_site("US", [model], None)
        entry = catalog.image_models["jimeng-4.1"]
        self.assertEqual(entry.supported_ratios("2k"), ["1:1"])
        self.assertEqual(len(catalog.skipped_ratios), 1)
        self.assertEqual(catalog.skipped_ratios[0].ratio_type, 42)

    def test_malformed_size_entries_are_dropped(self):
        model = raw_image_model("high_aes_general_v41", "Image 4.1", {"2k": [(1, 2048, 2048), (3, None, 936)]})
        sizes = model["resolution_map"]["2k"]["image_ratio_sizes"]
        sizes.append("not a size")
        sizes.append({"ratio_type": 5, "width": "wide", "height": 1664})
        model["resolution_map"]["4k"] = {"image_ratio_sizes": {"ratio_type": 1}}
        with self.assertLogs("catalog_parser", level="WARNING"):
            catalog = parse_site("HK", [model], None)
        entry = catalog.image_models["jimeng-4.1"]
        self.assertEqual(entry.supported_ratios("2k"), ["1:1"])
        self.assertEqual(entry.supported_ratios("4k"), [])
        self.assertEqual(len(catalog.skipped_ratios), 3)

    def test_entries_without_vendor_key_are_skipped(self):
        models = [{"model_name": "broken"}, raw_image_model("high_aes_general_v40", "Image 4.0")]
        catalog = parse_site("JP", models, [{"model_name": "no key"}])
        self.assertEqual(catalog.image_model_ids, ["jimeng-4.0"])
        self.assertEqual(catalog.video_model_ids, [])

    def test_empty_image_list_is_fatal(self):
        with self.assertRaises(ConfigEmptyError):
            parse_site("SG", [], VIDEO_MODELS)
        with self.assertRaises(ConfigEmptyError):
            parse_site("SG", None, VIDEO_MODELS)
        with self.assertRaises(ConfigEmptyError):
            parse_site("SG", [{"model_name": "no key"}], VIDEO_MODELS)

    def test_missing_video_list_gives_empty_catalog(self):
        catalog = parse_site("china", INTL_IMAGE_MODELS, None)
        self.assertEqual(dict(catalog.video_models), {})

    def test_video_options(self):
        model = raw_video_model("dreamina_x", "Video 3.0", options=[
            {"key": "ratio", "value_type": "enum",
             "enum_val": {"enum_type": "string", "string_value": ["16:9", "9:16"], "default_val_idx": 1}},
            {"key": "fps", "value_type": "enum",
             "enum_val": {"enum_type": "double", "double_value": [24.0, 30.0], "default_val_idx": 0}},
            {"key": "strength", "value_type": "slide_bar",
             "slide_bar_val": {"min": 0, "max": 10, "step": 1, "default": 5}, "forbidden_display": True},
            {"key": "mystery", "value_type": "bool"},
        ])
        catalog = parse_site("US", INTL_IMAGE_MODELS, [model])
        entry = catalog.video_models["video-3.0"]
        ratio, fps, strength, mystery = entry.options
        self.assertIsInstance(ratio, EnumOption)
        self.assertEqual(ratio.values, ("16:9", "9:16"))
        self.assertEqual(ratio.default_index, 1)
        self.assertEqual(fps.values, (24.0, 30.0))
        self.assertIsInstance(strength, SliderOption)
        self.assertTrue(strength.hidden)
        self.assertEqual(strength.default, 5)
        self.assertIsInstance(mystery, RawOption)
        self.assertEqual(entry.icon_url, "https://example.invalid/icon.png")
        self.assertEqual(entry.source_tag, "dreamina")
        self.assertEqual(entry.to_dict()["options"][2]["defaultValue"], 5)

    def test_empty_enum_value_list_still_selected(self):
        options = [{
            "key": "style",
            "value_type": "enum",
            "enum_val": {"string_value": [], "int_value": [1, 2], "default_val_idx": 0},
        }]
        catalog = parse_site("US", INTL_IMAGE_MODELS, [raw_video_model("k", "Video 3.0", options)])
        self.assertEqual(catalog.video_models["video-3.0"].options[0].values, ())

    def test_catalog_is_read_only(self):
        catalog = parse_site("US", INTL_IMAGE_MODELS, VIDEO_MODELS)
        with self.assertRaises(TypeError):
            catalog.image_models["x"] = None
        with self.assertRaises(AttributeError):
            catalog.last_updated = "now"


if __name__ == "__main__":
    unittest.main()
