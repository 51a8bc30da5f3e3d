import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from app.time_axis import HOUR_LABEL_FORMAT, build_hourly_labels

UTC = ZoneInfo("UTC")


class TestBuildHourlyLabels(unittest.TestCase):
    def test_zero_length_is_empty(self):
        self.assertEqual(build_hourly_labels(0, dt.datetime(2025, 1, 1, tzinfo=UTC)), [])

    def test_negative_length_is_empty(self):
        self.assertEqual(build_hourly_labels(-2, dt.datetime(2025, 1, 1, tzinfo=UTC)), [])

    def test_last_label_is_reference_hour(self):
        ref = dt.datetime(2025, 3, 4, 15, 42, 10, tzinfo=UTC)
        labels = build_hourly_labels(4, ref, UTC)
        self.assertEqual(
            labels,
            ["2025-03-04 12:00", "2025-03-04 13:00", "2025-03-04 14:00", "2025-03-04 15:00"],
        )

    def test_labels_cross_midnight_and_month(self):
        ref = dt.datetime(2025, 3, 1, 1, 5, tzinfo=UTC)
        labels = build_hourly_labels(3, ref, UTC)
        self.assertEqual(labels, ["2025-02-28 23:00", "2025-03-01 00:00", "2025-03-01 01:00"])

    def test_labels_render_in_requested_zone(self):
        ref = dt.datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
        labels = build_hourly_labels(2, ref, ZoneInfo("Asia/Tokyo"))
        self.assertEqual(labels, ["2025-06-01 20:00", "2025-06-01 21:00"])

    def test_steps_are_absolute_across_dst_gap(self):
        tz = ZoneInfo("America/New_York")
        ref = dt.datetime(2024, 3, 10, 3, 30, tzinfo=tz)  # 02:00-03:00 local does not exist
        labels = build_hourly_labels(3, ref, tz)
        self.assertEqual(labels, ["2024-03-10 00:00", "2024-03-10 01:00", "2024-03-10 03:00"])

    def test_default_zone_is_process_local(self):
        ref = dt.datetime(2025, 1, 15, 8, 0, tzinfo=UTC)
        labels = build_hourly_labels(1, ref)
        self.assertEqual(labels, [ref.astimezone().strftime(HOUR_LABEL_FORMAT)])

    def test_naive_reference_is_local_wall_time(self):
        ref = dt.datetime(2025, 1, 15, 8, 30)
        labels = build_hourly_labels(2, ref)
        self.assertEqual(labels[-1], "2025-01-15 08:00")
        self.assertEqual(len(labels), 2)


if __name__ == "__main__":
    unittest.main()
