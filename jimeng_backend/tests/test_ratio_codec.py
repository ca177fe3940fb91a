import unittest

from jimeng_backend.services import ratio_codec


class TestRatioCodec(unittest.TestCase):
    def test_round_trip_all_ratios(self):
        for code, ratio in ratio_codec.RATIO_TYPE_MAP.items():
            self.assertEqual(ratio_codec.to_ratio(ratio_codec.to_code(ratio)), ratio)
            self.assertEqual(ratio_codec.to_code(ratio_codec.to_ratio(code)), code)

    def test_known_codes(self):
        self.assertEqual(ratio_codec.to_code("16:9"), 3)
        self.assertEqual(ratio_codec.to_code("21:9"), 8)
        self.assertEqual(ratio_codec.to_ratio(5), "9:16")

    def test_unknown_ratio_string_falls_back_to_square(self):
        with self.assertLogs("ratio_codec", level="WARNING"):
            self.assertEqual(ratio_codec.to_code("5:4"), 1)

    def test_unknown_code_fails(self):
        with self.assertRaises(KeyError):
            ratio_codec.to_ratio(9)
        self.assertIsNone(ratio_codec.try_ratio(9))
        self.assertIsNone(ratio_codec.try_ratio(None))


if __name__ == "__main__":
    unittest.main()
