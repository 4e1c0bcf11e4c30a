import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import CreateAccountParams, create_account
from solders.transaction import Transaction
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    get_associated_token_address,
    initialize_mint,
    mint_to,
)

from artmint.identity import ServiceIdentity
from artmint.utils.token_metadata import (
    MetadataDecodeError,
    create_master_edition_v3,
    create_metadata_account_v3,
    decode_metadata_account,
    find_master_edition_pda,
    find_metadata_pda,
)

logger = logging.getLogger(__name__)

RPC_ERRORS = (
    SolanaRpcException,
    RPCException,
    UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError,
)


class ChainClientError(Exception):
    """Raised when a call to the Solana cluster fails or returns unusable data."""


@dataclass(frozen=True)
class NFTDefinition:
    """Everything needed to create a non-fungible token owned by ``owner``."""

    owner: Pubkey
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    is_mutable: bool = False
    creators: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class MintConfirmation:
    signature: Signature
    mint: Pubkey


class SolanaChainClient:
    """
    The only component that talks to the Solana RPC node.

    Transactions are paid for and signed by the service identity. The RPC
    connection is shared by all requests and owned by the application lifespan.
    """

    def __init__(self, rpc: AsyncClient, identity: ServiceIdentity, commitment: Commitment):
        self.rpc = rpc
        self.identity = identity
        self.commitment = commitment

    def build_create_nft_instructions(
        self, mint: Keypair, definition: NFTDefinition, rent_lamports: int
    ) -> List[Instruction]:
        """
        Instructions for a fresh mint with 0 decimals, one token in the owner's
        associated account, a metadata account and a master edition that
        locks the supply at one.
        """
        payer = self.identity.public_key
        mint_address = mint.pubkey()
        metadata = find_metadata_pda(mint_address)
        edition = find_master_edition_pda(mint_address)
        owner_token_account = get_associated_token_address(definition.owner, mint_address)

        return [
            create_account(
                CreateAccountParams(
                    from_pubkey=payer,
                    to_pubkey=mint_address,
                    lamports=rent_lamports,
                    space=MINT_LEN,
                    owner=TOKEN_PROGRAM_ID,
                )
            ),
            initialize_mint(
                InitializeMintParams(
                    decimals=0,
                    program_id=TOKEN_PROGRAM_ID,
                    mint=mint_address,
                    mint_authority=payer,
                    freeze_authority=payer,
                )
            ),
            create_associated_token_account(payer=payer, owner=definition.owner, mint=mint_address),
            mint_to(
                MintToParams(
                    program_id=TOKEN_PROGRAM_ID,
                    mint=mint_address,
                    dest=owner_token_account,
                    mint_authority=payer,
                    amount=1,
                )
            ),
            create_metadata_account_v3(
                metadata=metadata,
                mint=mint_address,
                mint_authority=payer,
                payer=payer,
                update_authority=payer,
                name=definition.name,
                symbol=definition.symbol,
                uri=definition.uri,
                seller_fee_basis_points=definition.seller_fee_basis_points,
                creators=definition.creators or None,
                is_mutable=definition.is_mutable,
            ),
            create_master_edition_v3(
                edition=edition,
                mint=mint_address,
                update_authority=payer,
                mint_authority=payer,
                payer=payer,
                metadata=metadata,
                max_supply=0,
            ),
        ]

    async def create_nft(self, mint: Keypair, definition: NFTDefinition) -> MintConfirmation:
        """Builds, signs, sends and confirms the create-NFT transaction."""
        try:
            rent = (await self.rpc.get_minimum_balance_for_rent_exemption(MINT_LEN)).value
            instructions = self.build_create_nft_instructions(mint, definition, rent)
            blockhash = (await self.rpc.get_latest_blockhash(self.commitment)).value.blockhash
            message = Message.new_with_blockhash(instructions, self.identity.public_key, blockhash)
            transaction = Transaction([self.identity.keypair, mint], message, blockhash)

            signature = (
                await self.rpc.send_transaction(transaction, opts=TxOpts(preflight_commitment=self.commitment))
            ).value
            logger.info("Submitted create-NFT transaction %s for mint %s", signature, mint.pubkey())

            statuses = (await self.rpc.confirm_transaction(signature, commitment=self.commitment)).value
        except RPC_ERRORS as e:
            raise ChainClientError(str(e) or e.__class__.__name__) from e

        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise ChainClientError(f"Transaction {signature} failed: {status.err}")
        return MintConfirmation(signature=signature, mint=mint.pubkey())

    async def fetch_metadata(self, mint: Pubkey) -> Optional[Dict[str, Any]]:
        """Returns the decoded metadata account for ``mint``, or None if it does not exist."""
        metadata_address = find_metadata_pda(mint)
        try:
            account = (await self.rpc.get_account_info(metadata_address, commitment=self.commitment)).value
        except RPC_ERRORS as e:
            raise ChainClientError(str(e) or e.__class__.__name__) from e

        if account is None:
            return None
        try:
            return decode_metadata_account(metadata_address, bytes(account.data))
        except MetadataDecodeError as e:
            raise ChainClientError(str(e)) from e
