"""
Metaplex Token Metadata program: account layouts, PDAs and the two legacy
instructions used to turn a fresh SPL mint into a non-fungible token.

All program data is Borsh-encoded. Layouts are declared with ``construct``.
"""
from typing import Any, Dict, List, Optional

from construct import (
    Adapter,
    Bytes,
    Const,
    Construct,
    ConstructError,
    Enum,
    Flag,
    GreedyBytes,
    Int8ul,
    Int16ul,
    Int32ul,
    Int64ul,
    PascalString,
    PrefixedArray,
    StreamError,
    Struct,
)
from construct.core import stream_read, stream_write
from pydantic.alias_generators import to_camel
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from spl.token.constants import TOKEN_PROGRAM_ID

from artmint.utils.serialization import WideInt

TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

METADATA_V1_KEY = 4
CREATE_MASTER_EDITION_V3_DISCRIMINATOR = 17
CREATE_METADATA_ACCOUNT_V3_DISCRIMINATOR = 33


class MetadataDecodeError(ValueError):
    """Raised when account data is not a Metaplex metadata account."""


class BorshOption(Construct):
    """Borsh ``Option<T>``: a one byte tag followed by the value when the tag is 1."""

    def __init__(self, subcon):
        super().__init__()
        self.subcon = subcon
        self.flagbuildnone = True

    def _parse(self, stream, context, path):
        try:
            tag = stream_read(stream, 1, path)[0]
        except StreamError:
            # Older accounts end before the trailing optional fields.
            return None
        if tag == 0:
            return None
        return self.subcon._parsereport(stream, context, path)

    def _build(self, obj, stream, context, path):
        if obj is None:
            stream_write(stream, b"\x00", 1, path)
            return None
        stream_write(stream, b"\x01", 1, path)
        return self.subcon._build(obj, stream, context, path)


class PublicKeyAdapter(Adapter):
    def _decode(self, obj, context, path):
        return str(Pubkey.from_bytes(obj))

    def _encode(self, obj, context, path):
        if isinstance(obj, Pubkey):
            return bytes(obj)
        return bytes(Pubkey.from_string(obj))


class PaddedStringAdapter(Adapter):
    """Metadata strings are stored padded with NUL bytes to a fixed length."""

    def _decode(self, obj, context, path):
        return obj.rstrip("\x00")

    def _encode(self, obj, context, path):
        return obj


class WideIntAdapter(Adapter):
    def _decode(self, obj, context, path):
        return WideInt(obj)

    def _encode(self, obj, context, path):
        return int(obj)


PublicKeyField = PublicKeyAdapter(Bytes(32))
BorshString = PaddedStringAdapter(PascalString(Int32ul, "utf8"))
U64 = WideIntAdapter(Int64ul)

TokenStandard = Enum(
    Int8ul,
    NonFungible=0,
    FungibleAsset=1,
    Fungible=2,
    NonFungibleEdition=3,
    ProgrammableNonFungible=4,
    ProgrammableNonFungibleEdition=5,
)

UseMethod = Enum(Int8ul, Burn=0, Multiple=1, Single=2)

Creator = Struct(
    "address" / PublicKeyField,
    "verified" / Flag,
    "share" / Int8ul,
)

Collection = Struct(
    "verified" / Flag,
    "key" / PublicKeyField,
)

Uses = Struct(
    "use_method" / UseMethod,
    "remaining" / U64,
    "total" / U64,
)

CollectionDetails = Struct(
    "kind" / Enum(Int8ul, V1=0, V2=1),
    "size" / U64,
)

Data = Struct(
    "name" / BorshString,
    "symbol" / BorshString,
    "uri" / BorshString,
    "seller_fee_basis_points" / Int16ul,
    "creators" / BorshOption(PrefixedArray(Int32ul, Creator)),
)

DataV2 = Struct(
    "name" / BorshString,
    "symbol" / BorshString,
    "uri" / BorshString,
    "seller_fee_basis_points" / Int16ul,
    "creators" / BorshOption(PrefixedArray(Int32ul, Creator)),
    "collection" / BorshOption(Collection),
    "uses" / BorshOption(Uses),
)

MetadataAccount = Struct(
    "key" / Int8ul,
    "update_authority" / PublicKeyField,
    "mint" / PublicKeyField,
    "data" / Data,
    "primary_sale_happened" / Flag,
    "is_mutable" / Flag,
    "edition_nonce" / BorshOption(Int8ul),
    "token_standard" / BorshOption(TokenStandard),
    "collection" / BorshOption(Collection),
    "uses" / BorshOption(Uses),
    "collection_details" / BorshOption(CollectionDetails),
    "_remaining" / GreedyBytes,
)

CreateMetadataAccountV3Args = Struct(
    "instruction" / Const(CREATE_METADATA_ACCOUNT_V3_DISCRIMINATOR, Int8ul),
    "data" / DataV2,
    "is_mutable" / Flag,
    "collection_details" / BorshOption(CollectionDetails),
)

CreateMasterEditionV3Args = Struct(
    "instruction" / Const(CREATE_MASTER_EDITION_V3_DISCRIMINATOR, Int8ul),
    "max_supply" / BorshOption(U64),
)


def find_metadata_pda(mint: Pubkey) -> Pubkey:
    seeds = [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint)]
    pda, _bump = Pubkey.find_program_address(seeds, TOKEN_METADATA_PROGRAM_ID)
    return pda


def find_master_edition_pda(mint: Pubkey) -> Pubkey:
    seeds = [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint), b"edition"]
    pda, _bump = Pubkey.find_program_address(seeds, TOKEN_METADATA_PROGRAM_ID)
    return pda


def _plain(value: Any) -> Any:
    """Converts parsed construct containers into plain dicts and lists, dropping private keys."""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items() if not key.startswith("_")}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, str):
        return str(value)
    return value


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(key): _camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_camelize(item) for item in value]
    return value


def decode_metadata_account(address: Pubkey, data: bytes) -> Dict[str, Any]:
    """
    Decodes a metadata account into a flat, camelCase record.

    The nested ``data`` section (name, symbol, uri, royalties, creators) is
    lifted to the top level. u64 fields are returned as ``WideInt``.
    """
    if not data or data[0] != METADATA_V1_KEY:
        raise MetadataDecodeError(f"Account {address} is not a metadata account.")
    try:
        parsed = _plain(MetadataAccount.parse(data))
    except (ConstructError, UnicodeDecodeError) as e:
        raise MetadataDecodeError(f"Malformed metadata account {address}: {e}") from e

    record = {"public_key": str(address), "key": parsed["key"]}
    record["update_authority"] = parsed["update_authority"]
    record["mint"] = parsed["mint"]
    record.update(parsed["data"])
    for field in (
        "primary_sale_happened",
        "is_mutable",
        "edition_nonce",
        "token_standard",
        "collection",
        "uses",
        "collection_details",
    ):
        record[field] = parsed[field]
    return _camelize(record)


def create_metadata_account_v3(
    metadata: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    update_authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    seller_fee_basis_points: int,
    creators: Optional[List[Dict[str, Any]]],
    is_mutable: bool,
) -> Instruction:
    data = CreateMetadataAccountV3Args.build(
        {
            "data": {
                "name": name,
                "symbol": symbol,
                "uri": uri,
                "seller_fee_basis_points": seller_fee_basis_points,
                "creators": creators,
                "collection": None,
                "uses": None,
            },
            "is_mutable": is_mutable,
            "collection_details": None,
        }
    )
    accounts = [
        AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=mint_authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=update_authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, accounts)


def create_master_edition_v3(
    edition: Pubkey,
    mint: Pubkey,
    update_authority: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    metadata: Pubkey,
    max_supply: Optional[int],
) -> Instruction:
    data = CreateMasterEditionV3Args.build({"max_supply": max_supply})
    accounts = [
        AccountMeta(pubkey=edition, is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=update_authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=mint_authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, accounts)
