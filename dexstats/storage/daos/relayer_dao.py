from typing import List, Optional
from sqlalchemy import select, update, delete, func
from dexstats.storage.daos.base_dao import BaseDao
from dexstats.storage.models.relayer import Relayer
from dexstats.utils.address import to_address


class RelayerDao(BaseDao):

    def create(self, relayer: Relayer) -> Relayer:
        with self._writing(f"create relayer {relayer.address}"):
            self.session.add(relayer)
        return relayer

    def get_all(self) -> List[Relayer]:
        with self._reading("list relayers"):
            return list(self.session.execute(select(Relayer).order_by(Relayer.id)).scalars().all())

    def get_by_address(self, address: str) -> Optional[Relayer]:
        with self._reading("get relayer"):
            return self.session.execute(
                select(Relayer).where(Relayer.address == to_address(address))
            ).scalars().first()

    def get_by_host(self, host: str) -> Optional[Relayer]:
        if not host:
            return None
        domain = host.split(":", 1)[0].lower()
        with self._reading("get relayer by host"):
            return self.session.execute(
                select(Relayer).where(func.lower(Relayer.domain) == domain)
            ).scalars().first()

    def update_by_address(self, address: str, **fields) -> int:
        with self._writing(f"update relayer {address}"):
            result = self.session.execute(
                update(Relayer).where(Relayer.address == to_address(address)).values(**fields)
            )
        return result.rowcount

    def update_name_by_address(self, address: str, name: str, url: str) -> int:
        return self.update_by_address(address, name=name, url=url)

    def delete_by_address(self, address: str) -> int:
        with self._writing(f"delete relayer {address}"):
            result = self.session.execute(
                delete(Relayer).where(Relayer.address == to_address(address))
            )
        return result.rowcount
