from typing import Iterable, List, Optional
from sqlalchemy import select, delete
from dexstats.storage.daos.base_dao import BaseDao
from dexstats.storage.models.pair import Pair
from dexstats.utils.address import to_address


def dedup_pairs(pairs: Iterable[Pair]) -> List[Pair]:
    """Keep the first-seen pair per (base, quote); later relayers listing the
    same tokens are dropped."""
    seen = set()
    out = []
    for p in pairs:
        key = (p.base_token_address, p.quote_token_address)
        if key in seen:
            continue
        seen.add(key)
        out.append(p)
    return out


class PairDao(BaseDao):

    def create(self, pair: Pair) -> Pair:
        with self._writing(f"create pair {pair.base_token_address}/{pair.quote_token_address}"):
            self.session.add(pair)
        return pair

    def get_all(self) -> List[Pair]:
        with self._reading("list pairs"):
            rows = self.session.execute(select(Pair).order_by(Pair.id)).scalars().all()
        return dedup_pairs(rows)

    def get_all_by_relayer(self, relayer_address: str) -> List[Pair]:
        """Every mirrored pair of one relayer, no dedup (reconciliation input)."""
        with self._reading("list relayer pairs"):
            return list(self.session.execute(
                select(Pair)
                .where(Pair.relayer_address == to_address(relayer_address))
                .order_by(Pair.id)
            ).scalars().all())

    def get_active_pairs(self) -> List[Pair]:
        with self._reading("list active pairs"):
            rows = self.session.execute(
                select(Pair).where(Pair.active.is_(True)).order_by(Pair.id)
            ).scalars().all()
        return dedup_pairs(rows)

    def get_active_pairs_by_relayer(self, relayer_address: str) -> List[Pair]:
        with self._reading("list active relayer pairs"):
            rows = self.session.execute(
                select(Pair)
                .where(Pair.active.is_(True), Pair.relayer_address == to_address(relayer_address))
                .order_by(Pair.id)
            ).scalars().all()
        return dedup_pairs(rows)

    def get_by_token_address(
        self, base_token: str, quote_token: str, relayer_address: Optional[str] = None
    ) -> Optional[Pair]:
        q = select(Pair).where(
            Pair.base_token_address == to_address(base_token),
            Pair.quote_token_address == to_address(quote_token),
        )
        if relayer_address:
            q = q.where(Pair.relayer_address == to_address(relayer_address))
        with self._reading("get pair"):
            return self.session.execute(q.order_by(Pair.id).limit(1)).scalars().first()

    def get_by_token_symbols(self, base_symbol: str, quote_symbol: str) -> Optional[Pair]:
        with self._reading("get pair by symbols"):
            return self.session.execute(
                select(Pair)
                .where(Pair.base_token_symbol == base_symbol, Pair.quote_token_symbol == quote_symbol)
                .order_by(Pair.id)
                .limit(1)
            ).scalars().first()

    def get_by_name(self, name: str) -> Optional[Pair]:
        """`name` is "BASE/QUOTE"."""
        base_symbol, _, quote_symbol = name.partition("/")
        if not quote_symbol:
            return None
        return self.get_by_token_symbols(base_symbol, quote_symbol)

    def delete_by_token_and_relayer(self, base_token: str, quote_token: str, relayer_address: str) -> int:
        with self._writing(f"delete pair {base_token}/{quote_token}"):
            result = self.session.execute(
                delete(Pair).where(
                    Pair.base_token_address == to_address(base_token),
                    Pair.quote_token_address == to_address(quote_token),
                    Pair.relayer_address == to_address(relayer_address),
                )
            )
        return result.rowcount
