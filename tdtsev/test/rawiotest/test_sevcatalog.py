"""
Tests of tdtsev.rawio.sevcatalog
"""

import tempfile
import unittest
from pathlib import Path

from tdtsev.rawio.sevcatalog import (
    SEV_HEADER_SIZE,
    build_catalog,
    parse_sev_filename,
    remote_source_path,
    scan_sev_files,
)
from tdtsev.rawio.sevexceptions import SevConfigurationError, SevFormatError
from tdtsev.test.generate_datasets import generate_sev_recording


class TestSevFilenames(unittest.TestCase):
    def test_first_hour(self):
        self.assertEqual(parse_sev_filename("Subject1-230101_Wav1_ch12"), (12, 0, "Wav1"))

    def test_later_hour(self):
        self.assertEqual(parse_sev_filename("Subject1-230101_Wav1_ch3-17h"), (3, 17, "Wav1"))

    def test_upper_case_channel_token(self):
        self.assertEqual(parse_sev_filename("Block_RAW1_Ch2"), (2, 0, "RAW1"))

    def test_no_channel_token(self):
        channel, chunk, event_name = parse_sev_filename("recording")
        self.assertEqual(channel, -1)
        self.assertEqual(chunk, 0)
        self.assertEqual(event_name, "recording")

    def test_last_token_wins(self):
        self.assertEqual(parse_sev_filename("Tank_ch9_Block_EEG1_ch4-2h")[:2], (4, 2))


class TestRemoteSource(unittest.TestCase):
    def test_no_device(self):
        self.assertIsNone(remote_source_path())
        self.assertIsNone(remote_source_path("", "", ""))

    def test_full_triple(self):
        self.assertEqual(
            remote_source_path("RS4-41001", "Tank1", "Block-3"),
            "\\\\RS4-41001\\data\\Tank1\\Block-3\\",
        )

    def test_partial_triple(self):
        for args in (("RS4", "", ""), ("RS4", "Tank1", ""), ("", "Tank1", "Block-3")):
            with self.assertRaises(SevConfigurationError):
                remote_source_path(*args)


class TestScanSevFiles(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.dirname = Path(self._tmpdir.name)

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_directory(self):
        generate_sev_recording(self.dirname, channels=(2, 1), chunks=(0, 1), npts=10)
        (self.dirname / "notes.txt").write_text("not a sev file")
        (self.dirname / "._Block-1_eeg_ch1.sev").write_bytes(b"\x00" * 4)

        dirname, filenames = scan_sev_files(self.dirname)
        self.assertEqual(dirname, str(self.dirname))
        self.assertEqual(
            filenames,
            [
                "Block-1_eeg_ch1-1h.sev",
                "Block-1_eeg_ch1.sev",
                "Block-1_eeg_ch2-1h.sev",
                "Block-1_eeg_ch2.sev",
            ],
        )

    def test_single_file(self):
        generate_sev_recording(self.dirname, channels=(1, 2), npts=10)
        dirname, filenames = scan_sev_files(self.dirname / "Block-1_eeg_ch2.sev")
        self.assertEqual(dirname, str(self.dirname))
        self.assertEqual(filenames, ["Block-1_eeg_ch2.sev"])

    def test_missing_source(self):
        _, filenames = scan_sev_files(self.dirname / "does_not_exist")
        self.assertEqual(filenames, [])

    def test_build_catalog(self):
        generate_sev_recording(self.dirname, channels=(1, 2), chunks=(0, 3), npts=25, dtype="int16")
        dirname, filenames = scan_sev_files(self.dirname)
        catalog = build_catalog(dirname, filenames)

        self.assertEqual(catalog.size, 4)
        self.assertEqual(list(catalog["chunk"]), [3, 0, 3, 0])
        self.assertEqual(list(catalog["channel"]), [1, 1, 2, 2])
        self.assertTrue(all(catalog["event_name"] == "eeg"))
        self.assertTrue(all(catalog["size"] == SEV_HEADER_SIZE + 50))
        self.assertTrue(all(catalog["data_size"] == 50))

    def test_event_name_too_long(self):
        event_name = "e" * 70
        generate_sev_recording(self.dirname, event_name=event_name, npts=10)
        dirname, filenames = scan_sev_files(self.dirname)
        with self.assertRaises(SevFormatError):
            build_catalog(dirname, filenames)


if __name__ == "__main__":
    unittest.main()
