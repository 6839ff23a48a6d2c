"""
Unit Tests for TLE Parsing and Decoding

Run with:
    python -m pytest tests/test_tle_parser.py -v
"""

import math
import unittest

from orbit_track.errors import DecodeError
from orbit_track.tle_parser import (
    DecodedOrbitalState,
    RawElementRecord,
    TLEParser,
    checksum,
    decode,
    format_elements,
    orbital_elements,
    parse_catalog,
)

ISS_LINE1 = "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995"
ISS_LINE2 = "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598"
VANGUARD_LINE1 = "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  4753"
VANGUARD_LINE2 = "2 00005  34.2682 348.7242 1859667 331.7664  19.3264 10.82419157413667"


class TestCatalogParsing(unittest.TestCase):
    """Test splitting of raw catalog text into records."""

    def test_three_line_blocks_with_noise(self):
        """Blank lines, indentation and mixed line endings are ignored."""
        text = (
            "\r\n"
            "ISS (ZARYA)\r\n"
            f"{ISS_LINE1}\r\n"
            f"  {ISS_LINE2}  \n"
            "\n\n   \n"
            "VANGUARD 1\n"
            f"{VANGUARD_LINE1}\r\n"
            f"{VANGUARD_LINE2}\n"
        )

        records = parse_catalog(text)

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0], RawElementRecord("ISS (ZARYA)", ISS_LINE1, ISS_LINE2))
        self.assertEqual(records[1].name, "VANGUARD 1")
        self.assertEqual(records[1].line1, VANGUARD_LINE1)
        self.assertEqual(records[1].line2, VANGUARD_LINE2)

    def test_trailing_fragment_dropped(self):
        """A truncated trailing line 1 is skipped without error."""
        text = "\n".join([
            "ISS (ZARYA)", ISS_LINE1, ISS_LINE2,
            "VANGUARD 1", VANGUARD_LINE1, VANGUARD_LINE2,
            "BROKEN", "1 99999U 99999A   23259.5",
        ])

        records = parse_catalog(text)

        self.assertEqual(len(records), 2)
        self.assertEqual([r.name for r in records], ["ISS (ZARYA)", "VANGUARD 1"])

    def test_first_line_pair_is_unknown(self):
        """A pair at the very start of the input has no name line."""
        records = parse_catalog(f"{ISS_LINE1}\n{ISS_LINE2}\n")

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].name, "Unknown")

    def test_two_line_blocks_take_preceding_line_as_name(self):
        """Without name lines, the preceding line still becomes the name."""
        text = "\n".join([ISS_LINE1, ISS_LINE2, VANGUARD_LINE1, VANGUARD_LINE2])

        records = parse_catalog(text)

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0].name, "Unknown")
        self.assertEqual(records[1].name, ISS_LINE2)

    def test_consumed_lines_are_not_reused(self):
        """Scanning resumes after both lines of an emitted pair."""
        text = "\n".join(["ISS (ZARYA)", ISS_LINE1, ISS_LINE2, ISS_LINE2])

        records = parse_catalog(text)

        self.assertEqual(len(records), 1)

    def test_unmatched_lines_skipped(self):
        """Orphan line 1 and line 2 entries are dropped, good pairs kept."""
        text = "\n".join([
            "ORPHAN", ISS_LINE1, "NOT A TLE LINE",
            ISS_LINE2,
            "VANGUARD 1", VANGUARD_LINE1, VANGUARD_LINE2,
        ])

        records = parse_catalog(text)

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].name, "VANGUARD 1")

    def test_empty_input(self):
        """No pairs yields an empty list, never an error."""
        self.assertEqual(parse_catalog(""), [])
        self.assertEqual(parse_catalog("\n\r\n  \n"), [])
        self.assertEqual(parse_catalog("just some text\nand more"), [])


class TestDecoding(unittest.TestCase):
    """Test element set validation and decoding."""

    def setUp(self):
        """Set up test fixtures."""
        self.parser = TLEParser()

    def test_decode_iss(self):
        """Decoded values match the element set fields."""
        state = decode(ISS_LINE1, ISS_LINE2)

        self.assertIsInstance(state, DecodedOrbitalState)
        self.assertEqual(state.catalog_number, 25544)
        self.assertAlmostEqual(math.degrees(state.inclination), 51.6416, places=4)
        self.assertAlmostEqual(math.degrees(state.raan), 220.9944, places=4)
        self.assertAlmostEqual(state.eccentricity, 0.0004263, places=7)
        self.assertAlmostEqual(math.degrees(state.arg_perigee), 122.0101, places=4)
        self.assertAlmostEqual(math.degrees(state.mean_anomaly), 312.2755, places=4)
        self.assertAlmostEqual(state.mean_motion_rev_per_day, 15.49541986, places=6)
        self.assertAlmostEqual(state.bstar, 0.21844e-3, places=9)

    def test_epoch(self):
        """Epoch 23259.57580000 is 2023-09-16 13:49:09 UTC."""
        epoch = decode(ISS_LINE1, ISS_LINE2).epoch

        self.assertEqual((epoch.year, epoch.month, epoch.day), (2023, 9, 16))
        self.assertEqual((epoch.hour, epoch.minute, epoch.second), (13, 49, 9))
        self.assertEqual(epoch.utcoffset().total_seconds(), 0)

    def test_epoch_century(self):
        """Two-digit years 57-99 are 1900s, 00-56 are 2000s."""
        self.assertEqual(self.parser.epoch_to_datetime(58, 1.0).year, 1958)
        self.assertEqual(self.parser.epoch_to_datetime(0, 1.0).year, 2000)
        self.assertEqual(decode(VANGUARD_LINE1, VANGUARD_LINE2).epoch.year, 2000)

    def test_trailing_whitespace_tolerated(self):
        """Trailing whitespace does not count toward the line length."""
        state = decode(ISS_LINE1 + "  ", ISS_LINE2 + "\t")
        self.assertEqual(state.catalog_number, 25544)

    def test_checksum(self):
        """Checksums of known-good lines match column 69."""
        for line in (ISS_LINE1, ISS_LINE2, VANGUARD_LINE1, VANGUARD_LINE2):
            self.assertEqual(checksum(line), int(line[68]))

    def test_checksum_mismatch(self):
        """A wrong checksum digit is rejected."""
        bad_line1 = ISS_LINE1[:68] + "0"

        with self.assertRaises(DecodeError) as ctx:
            decode(bad_line1, ISS_LINE2)
        self.assertIn("checksum", str(ctx.exception))
        self.assertEqual(ctx.exception.line1, bad_line1)

    def test_wrong_length(self):
        """Truncated lines are rejected."""
        with self.assertRaises(DecodeError):
            decode(ISS_LINE1[:60], ISS_LINE2)

    def test_swapped_lines(self):
        """Line prefixes must be '1 ' and '2 '."""
        with self.assertRaises(DecodeError):
            decode(ISS_LINE2, ISS_LINE1)

    def test_catalog_number_mismatch(self):
        """Lines from different satellites are rejected."""
        with self.assertRaises(DecodeError) as ctx:
            decode(VANGUARD_LINE1, ISS_LINE2)
        self.assertIn("Catalog numbers differ", str(ctx.exception))

    def test_malformed_field(self):
        """A non-numeric field is rejected even with a valid checksum."""
        # '0' -> 'x' keeps the checksum unchanged
        bad_line2 = ISS_LINE2[:26] + "x" + ISS_LINE2[27:]
        self.assertEqual(checksum(bad_line2), int(bad_line2[68]))

        with self.assertRaises(DecodeError) as ctx:
            decode(ISS_LINE1, bad_line2)
        self.assertIn("eccentricity", str(ctx.exception))

    def test_decode_error_is_value_error(self):
        """Callers catching ValueError also catch decode failures."""
        with self.assertRaises(ValueError):
            decode("garbage", "more garbage")


class TestOrbitalElements(unittest.TestCase):
    """Test display projections of the decoded state."""

    def setUp(self):
        """Set up test fixtures."""
        self.state = decode(ISS_LINE1, ISS_LINE2)

    def test_orbital_elements(self):
        """Numeric elements are in degrees and revolutions per day."""
        elements = orbital_elements(self.state)

        self.assertEqual(elements["catalog_number"], 25544)
        self.assertAlmostEqual(elements["inclination_deg"], 51.6416, places=4)
        self.assertAlmostEqual(elements["mean_motion_rev_per_day"], 15.49541986, places=6)
        self.assertTrue(elements["epoch"].startswith("2023-09-16T13:49:09"))

    def test_format_elements(self):
        """Display strings use fixed precision and units."""
        display = format_elements(self.state)

        self.assertEqual(display["Catalog Number"], "25544")
        self.assertEqual(display["Inclination"], "51.6416°")
        self.assertEqual(display["RA of Ascending Node"], "220.9944°")
        self.assertEqual(display["Eccentricity"], "0.0004263")
        self.assertEqual(display["Argument of Perigee"], "122.0101°")
        self.assertEqual(display["Mean Anomaly"], "312.2755°")
        self.assertEqual(display["Mean Motion"], "15.4954 revs/day")


if __name__ == "__main__":
    unittest.main()
