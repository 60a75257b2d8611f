"""
proofgate - command-line interface for the balance validator.

Commands:
  node                          serve the JSON-RPC dev node (uvicorn)
  deploy NETWORK                deploy BalanceVerifier (+ mock verifier)
  submit NETWORK PROOF_FILE     simulate, submit and confirm a proof
  balance NETWORK               read the last verified balance
  decode PROOF_FILE             print the journal inside a proof bundle
  prove URL                     obtain a web proof and save the bundle

Global options:
  --json                  Output JSON instead of human-readable text
  --verbose / -v          DEBUG logging
  --log-format TEXT       text | json (default: text on a TTY)

Examples:
  proofgate node --port 8545
  PRIVATE_KEY=0x… proofgate deploy devnet
  proofgate submit devnet proof.json
  proofgate balance devnet
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from core import logging as clog
from core.types.journal import JournalDecodeError, decode_journal

from ..config import SDKConfig
from ..errors import ProofgateSdkError, ValidationRejected

app = typer.Typer(
    name="proofgate",
    help="Proof-gated balance validator: node, deployment, proving and submission",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self):
        self.json_output: bool = False
        self.verbose: bool = False


_ctx = GlobalContext()


@app.callback()
def main_callback(
    json_output: bool = typer.Option(False, "--json", help="Output JSON instead of human-readable text"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="DEBUG logging"),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="text | json", envvar="PROOFGATE_LOG_FORMAT"
    ),
) -> None:
    """proofgate CLI."""
    _ctx.json_output = json_output
    _ctx.verbose = verbose
    fmt = (log_format or "").strip().lower()
    clog.configure(
        json=True if fmt == "json" else False if fmt == "text" else None,
        level="DEBUG" if verbose else "INFO",
    )


# ----------------------------------------------------------------------------
# Output helpers
# ----------------------------------------------------------------------------


def _emit(obj: Dict[str, Any], human: List[str]) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps(obj, indent=2))
    else:
        for line in human:
            typer.echo(line)


def _fail(err: Exception) -> NoReturn:
    typer.secho(f"error: {err}", fg=typer.colors.RED, err=True)
    if isinstance(err, ValidationRejected):
        typer.echo(f"  the validator refused the proof at {err.stage} ({err.kind})", err=True)
    raise typer.Exit(code=1)


def _config(network: str) -> SDKConfig:
    try:
        return SDKConfig.from_env(network)
    except ProofgateSdkError as e:
        _fail(e)


# ----------------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------------


@app.command()
def node(
    host: Optional[str] = typer.Option(None, help="Bind host (PROOFGATE_NODE_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (PROOFGATE_NODE_PORT)"),
    chain_id: Optional[int] = typer.Option(None, "--chain-id", help="Chain id (PROOFGATE_CHAIN_ID)"),
    block_time: Optional[float] = typer.Option(
        None, "--block-time", help="Disable automine and mine every N seconds"
    ),
) -> None:
    """Serve the JSON-RPC dev node."""
    from dataclasses import replace

    from rpc import server
    from rpc.config import load_config

    cfg = load_config()
    overrides: Dict[str, Any] = {}
    if host:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if chain_id is not None:
        overrides["chain_id"] = chain_id
    if block_time is not None:
        overrides.update(automine=False, block_time=max(0.0, block_time))
    server.main(replace(cfg, **overrides))


@app.command()
def deploy(
    network: str = typer.Argument(..., help="Network name, e.g. devnet"),
    verifier: Optional[str] = typer.Option(
        None, "--verifier", help="Receipt verifier address; a mock verifier is deployed when omitted"
    ),
) -> None:
    """Deploy BalanceVerifier and write deployments/<network>.json."""
    from ..contracts.deployer import DeployOptions
    from ..contracts.deployer import deploy as run_deploy

    cfg = _config(network)
    try:
        record = run_deploy(DeployOptions(network=network, verifier_address=verifier), cfg=cfg)
    except ProofgateSdkError as e:
        _fail(e)
    _emit(
        record.model_dump(by_alias=True),
        [
            f"BalanceVerifier deployed on {record.network} (chain {record.chain_id})",
            f"  address:   {record.contract_address}",
            f"  verifier:  {record.parameters.verifier_address}",
            f"  tx:        {record.transaction_hash} (block {record.block_number}, gas {record.gas_used})",
        ],
    )


@app.command()
def submit(
    network: str = typer.Argument(..., help="Network name, e.g. devnet"),
    proof_file: Path = typer.Argument(..., help="Proof bundle JSON"),
    contract_address: Optional[str] = typer.Argument(
        None, help="Validator address (default: from deployments/<network>.json)"
    ),
) -> None:
    """Simulate, submit and confirm a proof; print the verified balance."""
    from ..submit import SubmitOptions, submit_proof

    cfg = _config(network)
    try:
        result = submit_proof(
            SubmitOptions(network=network, proof_file=proof_file, contract_address=contract_address),
            cfg=cfg,
        )
    except ProofgateSdkError as e:
        _fail(e)
    _emit(
        result.to_dict(),
        [
            "proof accepted",
            f"  tx:       {result.transaction_hash}",
            f"  block:    {result.block_number}",
            f"  gas used: {result.gas_used}",
            f"  balance:  {result.balance}",
        ],
    )


@app.command()
def balance(
    network: str = typer.Argument(..., help="Network name, e.g. devnet"),
    contract_address: Optional[str] = typer.Argument(None, help="Validator address"),
) -> None:
    """Read the last verified balance (empty before the first accepted proof)."""
    from contracts.balance_verifier.abi import BALANCE_VERIFIER_ABI

    from ..contracts.client import ContractClient
    from ..rpc.http import RpcClient
    from ..submit import resolve_contract_address

    cfg = _config(network)
    try:
        address = resolve_contract_address(cfg, contract_address)
        with RpcClient(cfg.rpc_url, timeout=cfg.request_timeout, max_retries=cfg.max_retries) as rpc:
            value = ContractClient(rpc, address, BALANCE_VERIFIER_ABI, chain_id=cfg.chain_id).call("balance")
    except ProofgateSdkError as e:
        _fail(e)
    _emit({"contractAddress": address, "balance": value}, [f"{address}: {value!r}"])


@app.command()
def decode(proof_file: Path = typer.Argument(..., help="Proof bundle JSON")) -> None:
    """Decode and print the journal of a proof bundle."""
    from ..proofs.bundle import load_proof_bundle

    try:
        bundle = load_proof_bundle(proof_file)
    except ProofgateSdkError as e:
        _fail(e)
    try:
        journal = decode_journal(bundle.journal)
    except JournalDecodeError as e:
        typer.secho(f"error: journal does not decode: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    obj = journal.to_dict()
    obj["timestampIso"] = journal.timestamp_iso()
    obj["sealLength"] = len(bundle.seal)
    _emit(obj, [f"{k:<22} {v}" for k, v in obj.items()])


@app.command()
def prove(
    url: str = typer.Argument(..., help="HTTPS URL to notarize"),
    out: Path = typer.Option(Path("proof.json"), "--out", "-o", help="Where to write the bundle"),
    header: List[str] = typer.Option([], "--header", "-H", help="Extra request header, 'Name: value'"),
) -> None:
    """Obtain a web proof for URL, compress it and save the proof bundle."""
    from ..proofs.bundle import save_proof_bundle
    from ..prover import WebProverClient

    try:
        with WebProverClient.from_env() as prover:
            bundle = prover.prove_and_compress(url, header)
    except ProofgateSdkError as e:
        _fail(e)
    path = save_proof_bundle(bundle, out)
    _emit({"proofFile": str(path)}, [f"proof bundle saved to {path}", f"  submit with: proofgate submit devnet {path}"])


def main(argv: Optional[List[str]] = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:], prog_name="proofgate")


if __name__ == "__main__":
    main()


__all__ = ["app", "main"]
