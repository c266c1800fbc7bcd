from typing import List, Optional
from sqlalchemy import select, update, delete
from dexstats.storage.daos.base_dao import BaseDao
from dexstats.storage.models.token import Token
from dexstats.utils.address import to_address


class TokenDao(BaseDao):

    def create(self, token: Token) -> Token:
        with self._writing(f"create token {token.contract_address}"):
            self.session.add(token)
        return token

    def get_all(self) -> List[Token]:
        with self._reading("list tokens"):
            return list(self.session.execute(select(Token).order_by(Token.id)).scalars().all())

    def get_all_by_relayer(self, relayer_address: str) -> List[Token]:
        with self._reading("list relayer tokens"):
            return list(self.session.execute(
                select(Token)
                .where(Token.relayer_address == to_address(relayer_address))
                .order_by(Token.id)
            ).scalars().all())

    def get_by_token_and_relayer(self, contract_address: str, relayer_address: str) -> Optional[Token]:
        with self._reading("get token"):
            return self.session.execute(
                select(Token).where(
                    Token.contract_address == to_address(contract_address),
                    Token.relayer_address == to_address(relayer_address),
                )
            ).scalars().first()

    def update_by_token_and_relayer(self, contract_address: str, relayer_address: str, **fields) -> int:
        with self._writing(f"update token {contract_address}"):
            result = self.session.execute(
                update(Token)
                .where(
                    Token.contract_address == to_address(contract_address),
                    Token.relayer_address == to_address(relayer_address),
                )
                .values(**fields)
            )
        return result.rowcount

    def delete_by_token_and_relayer(self, contract_address: str, relayer_address: str) -> int:
        with self._writing(f"delete token {contract_address}"):
            result = self.session.execute(
                delete(Token).where(
                    Token.contract_address == to_address(contract_address),
                    Token.relayer_address == to_address(relayer_address),
                )
            )
        return result.rowcount
