import random
import unittest

import numpy as np

from aqsnet.analysis.correlation import analyze_correlation, paired_samples, pearson_correlation
from aqsnet.analysis.gaps import compute_thresholds, find_monitoring_gaps, percentile_value
from aqsnet.analysis.isolation import compute_isolation, isolation_statistics
from aqsnet.network.monitoring_network import build_network
from aqsnet.network.station import Station


def make_station(site_number, lat=40.0, lon=-74.0, isolation=None):
    return Station(
        state_code="01",
        county_code="001",
        site_number=site_number,
        latitude=lat,
        longitude=lon,
        site_name=f"Station{site_number}",
        city_name="Test City",
        state_name="Test State",
        isolation=isolation,
    )


def network_with_isolation(values):
    """Network whose stations carry the given isolation values (None allowed)."""
    network = build_network(make_station(f"{i:04d}") for i in range(1, len(values) + 1))
    for i, v in enumerate(values, start=1):
        network.stations[f"01-001-{i:04d}"].isolation = v
    return network


class TestIsolation(unittest.TestCase):
    def test_three_close_stations_all_defined(self):
        network = build_network([
            make_station("0001", 40.0, -74.0),
            make_station("0002", 40.1, -74.1),
            make_station("0003", 40.2, -74.2),
        ])
        network.build_adjacency()
        assigned = compute_isolation(network, 1)
        self.assertEqual(assigned, 3)
        for station in network.stations.values():
            self.assertIsNotNone(station.isolation, station.site_name)

    def test_station_without_neighbors_stays_undefined(self):
        network = build_network([
            make_station("0001", 40.0, -74.0),
            make_station("0002", 40.1, -74.1),
            make_station("0003", -30.0, 20.0),
        ])
        network.build_adjacency()
        compute_isolation(network, 5)
        self.assertIsNone(network.stations["01-001-0003"].isolation)
        self.assertIsNotNone(network.stations["01-001-0001"].isolation)

    def test_average_of_k_nearest(self):
        network = build_network([
            make_station("0001", 40.0, -74.0),
            make_station("0002", 40.1, -74.1),
            make_station("0003", 40.2, -74.2),
        ])
        network.build_adjacency()
        compute_isolation(network, 2)
        neighbors = network.neighbors("01-001-0001")
        expected = (neighbors[0][1] + neighbors[1][1]) / 2
        self.assertAlmostEqual(network.stations["01-001-0001"].isolation, expected)

    def test_k_larger_than_neighbor_count_uses_all(self):
        network = build_network([make_station("0001", 40.0, -74.0),
                                 make_station("0002", 40.1, -74.1)])
        network.build_adjacency()
        compute_isolation(network, 50)
        d = network.neighbors("01-001-0001")[0][1]
        self.assertAlmostEqual(network.stations["01-001-0001"].isolation, d)

    def test_monotonic_in_k(self):
        rng = random.Random(7)
        stations = [
            make_station(f"{i:04d}", 40.0 + rng.uniform(-1, 1), -74.0 + rng.uniform(-1, 1))
            for i in range(40)
        ]
        network = build_network(stations)
        network.build_adjacency()
        previous = {}
        for k in (1, 2, 3, 5, 8, 13):
            compute_isolation(network, k)
            for station_id, station in network.stations.items():
                if station_id in previous:
                    self.assertGreaterEqual(station.isolation + 1e-9, previous[station_id])
                previous[station_id] = station.isolation

    def test_rejects_invalid_k(self):
        network = build_network([make_station("0001")])
        for bad in (0, -3, 1.5, True, np.int64(0)):
            with self.assertRaises(ValueError):
                compute_isolation(network, bad)

    def test_accepts_numpy_integer_k(self):
        network = build_network([make_station("0001", 40.0, -74.0),
                                 make_station("0002", 40.1, -74.1)])
        network.build_adjacency()
        self.assertEqual(compute_isolation(network, np.int64(3)), 2)

    def test_rebuild_with_smaller_cutoff_clears_stale_scores(self):
        # 0.5 degrees of latitude apart, ~55.6 km
        network = build_network([make_station("0001", 40.0, -74.0),
                                 make_station("0002", 40.5, -74.0)])
        network.build_adjacency(max_neighbor_distance_km=300.0)
        compute_isolation(network, 1)
        self.assertAlmostEqual(network.stations["01-001-0001"].isolation, 55.6, delta=0.1)

        network.build_adjacency(max_neighbor_distance_km=10.0)
        self.assertEqual(network.isolation_values(), [])
        compute_isolation(network, 1)
        for station_id, station in network.stations.items():
            self.assertEqual(network.neighbors(station_id), [])
            self.assertIsNone(station.isolation)
        self.assertIsNone(isolation_statistics(network))

    def test_adding_station_clears_scores(self):
        network = build_network([make_station("0001", 40.0, -74.0),
                                 make_station("0002", 40.1, -74.1)])
        network.build_adjacency()
        compute_isolation(network, 1)
        network.add_station(make_station("0003", 40.2, -74.2, isolation=12.0))
        self.assertEqual(network.isolation_values(), [])

    def test_recompute_without_neighbors_clears_score(self):
        network = build_network([make_station("0001", 40.0, -74.0)])
        network.stations["01-001-0001"].isolation = 42.0
        compute_isolation(network, 1)
        self.assertIsNone(network.stations["01-001-0001"].isolation)

    def test_statistics(self):
        network = network_with_isolation([4.0, None, 1.0, 3.0, 2.0])
        stats = isolation_statistics(network)
        self.assertEqual(stats.count, 4)
        self.assertEqual(stats.minimum, 1.0)
        self.assertEqual(stats.maximum, 4.0)
        self.assertEqual(stats.median, 3.0)  # upper-middle element
        self.assertEqual(stats.mean, 2.5)

    def test_statistics_empty(self):
        self.assertIsNone(isolation_statistics(network_with_isolation([None, None])))


class TestCorrelation(unittest.TestCase):
    def test_perfect_negative(self):
        network = network_with_isolation([10.0, 20.0])
        pollution = {"01-001-0001": 20.0, "01-001-0002": 10.0}
        self.assertEqual(analyze_correlation(network, pollution), -1.0)

    def test_perfect_positive(self):
        self.assertAlmostEqual(pearson_correlation([(1.0, 2.0), (2.0, 4.0), (3.0, 6.0)]), 1.0)

    def test_no_pairs(self):
        network = network_with_isolation([10.0, None])
        self.assertEqual(analyze_correlation(network, {"01-001-0002": 5.0}), 0.0)
        self.assertEqual(analyze_correlation(network, {}), 0.0)

    def test_zero_variance(self):
        self.assertEqual(pearson_correlation([(5.0, 1.0), (5.0, 2.0), (5.0, 3.0)]), 0.0)
        self.assertEqual(pearson_correlation([(1.0, 7.0)]), 0.0)

    def test_only_stations_with_both_values_are_paired(self):
        network = network_with_isolation([10.0, None, 30.0])
        pollution = {"01-001-0001": 1.0, "01-001-0002": 2.0, "09-999-0001": 3.0}
        self.assertEqual(paired_samples(network, pollution), [(10.0, 1.0)])

    def test_bounded(self):
        rng = random.Random(11)
        for _ in range(50):
            pairs = [(rng.uniform(0, 300), rng.uniform(0, 40)) for _ in range(rng.randint(1, 30))]
            r = pearson_correlation(pairs)
            self.assertGreaterEqual(r, -1.0)
            self.assertLessEqual(r, 1.0)


class TestGaps(unittest.TestCase):
    def test_percentile_uses_truncated_rank(self):
        self.assertEqual(percentile_value([4, 1, 3, 2]), 4)  # floor(0.75 * 4) = 3
        self.assertEqual(percentile_value([5, 1, 4, 2, 3]), 4)  # floor(3.75) = 3
        self.assertEqual(percentile_value([7.0]), 7.0)
        self.assertIsNone(percentile_value([]))

    def test_thresholds_use_independent_populations(self):
        network = network_with_isolation([10.0, 20.0, 30.0, 40.0, None])
        # pollution known for a different subset, including a site outside the network
        pollution = {"01-001-0001": 1.0, "01-001-0005": 2.0, "02-002-0002": 3.0}
        self.assertEqual(compute_thresholds(network, pollution), (40.0, 3.0))

    def test_thresholds_deterministic(self):
        network = network_with_isolation([3.0, 1.0, 2.0, 5.0, 4.0])
        pollution = {"01-001-0001": 9.0, "01-001-0002": 7.0, "01-001-0003": 8.0}
        first = compute_thresholds(network, pollution)
        for _ in range(3):
            self.assertEqual(compute_thresholds(network, pollution), first)

    def test_thresholds_without_data(self):
        self.assertIsNone(compute_thresholds(network_with_isolation([None]), {"01-001-0001": 1.0}))
        self.assertIsNone(compute_thresholds(network_with_isolation([1.0]), {}))

    def test_find_gaps_strictly_above_and_sorted(self):
        network = network_with_isolation([50.0, 80.0, 80.0, 20.0, 100.0, 60.0, None])
        pollution = {
            "01-001-0001": 12.0,
            "01-001-0002": 15.0,
            "01-001-0003": 11.0,
            "01-001-0004": 30.0,  # not isolated enough
            "01-001-0005": 10.0,  # pollution equal to threshold, excluded
            "01-001-0007": 99.0,  # no isolation value
        }
        gaps = find_monitoring_gaps(network, pollution, 50.0, 10.0)
        self.assertEqual([s.id for s, _ in gaps], ["01-001-0002", "01-001-0003"])
        self.assertEqual([p for _, p in gaps], [15.0, 11.0])
        for station, value in gaps:
            self.assertGreater(station.isolation, 50.0)
            self.assertGreater(value, 10.0)

    def test_find_gaps_orders_by_isolation_descending(self):
        network = network_with_isolation([5.0, 9.0, 7.0])
        pollution = {f"01-001-000{i}": 1.0 for i in range(1, 4)}
        gaps = find_monitoring_gaps(network, pollution, 0.0, 0.0)
        isolations = [s.isolation for s, _ in gaps]
        self.assertEqual(isolations, [9.0, 7.0, 5.0])


if __name__ == "__main__":
    unittest.main()
