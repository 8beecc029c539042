import logging

from gf_checksum.checksum import stage as checksum_stage
from gf_checksum.slots import erase


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    payload = b"erasure"

    for k in (1, 2, 4):
        cfg = checksum_stage.Config(redundancy=k)
        encoded = checksum_stage.encode(payload, cfg=cfg)

        # Lose the first k slots (all data) and recover them from the checksums.
        slots = erase(encoded, range(k))
        decoded = checksum_stage.decode(slots, cfg=cfg)

        # Hard correctness check
        assert decoded == payload, f"k={k}: {decoded!r} != {payload!r}"
        print(f"k={k}: checksums={encoded[len(payload):].hex()} recovered={decoded!r}")
