import pytest

from hs_rosetta.core.covenants import CovenantType, is_unspendable
from hs_rosetta.core.models import Covenant

ADMINISTRATIVE = [
    CovenantType.REGISTER,
    CovenantType.UPDATE,
    CovenantType.RENEW,
    CovenantType.TRANSFER,
    CovenantType.FINALIZE,
    CovenantType.REVOKE,
]


class TestIsUnspendable:

    @pytest.mark.parametrize("kind", ADMINISTRATIVE)
    def test_register_through_revoke_are_unspendable(self, kind):
        assert is_unspendable(kind)
        assert is_unspendable(Covenant(type=kind))

    @pytest.mark.parametrize("kind", [t for t in CovenantType if t not in ADMINISTRATIVE])
    def test_other_covenants_are_spendable(self, kind):
        assert not is_unspendable(kind)
        assert not is_unspendable(Covenant(type=kind))

    def test_range_boundaries(self):
        assert not is_unspendable(5)
        assert is_unspendable(6)
        assert is_unspendable(11)
        assert not is_unspendable(12)

    def test_exactly_six_administrative_types(self):
        assert sum(1 for t in CovenantType if is_unspendable(t)) == 6
