from noisegen.seed import cksum, timestamp_seed, SEED_MODULUS


def test_cksum_matches_posix_check_values():
    assert cksum(b"") == 4294967295
    assert cksum(b"123456789") == 930766865


def test_timestamp_seed_in_range():
    for now_ns in (0, 1, 1_700_000_000_123_456_789, 2**63 - 1):
        seed = timestamp_seed(now_ns)
        assert 0 <= seed < SEED_MODULUS


def test_timestamp_seed_is_checksum_of_echoed_timestamp():
    now_ns = 1_700_000_000_123_456_789
    expected = cksum(b"1700000000123456789\n") % SEED_MODULUS
    assert timestamp_seed(now_ns) == expected
    assert timestamp_seed(now_ns) == timestamp_seed(now_ns)


def test_timestamp_seed_defaults_to_current_time():
    assert 0 <= timestamp_seed() < SEED_MODULUS
