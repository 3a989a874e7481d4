"""
DNS Manager - Orchestrates sync, classification and topology building

This module wires the record sources, the record store, the classifier and
the topology builder together, and renders their results on the console.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import yaml
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from ..providers.dns_client import DNSClient
from ..store.record_store import RecordStore, YAMLRecordStore
from .classifier import Classifier
from .models import (
    GroupedTopology,
    ManagedRecord,
    ProviderInfo,
    ServerSuggestion,
    SyncedRecord,
    _plain,
)
from .record_manager import ProviderSyncSummary, RecordManager
from .topology import build_topology

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = "dnsmesh-records.yaml"

CONFIDENCE_STYLES = {"high": "green", "medium": "yellow", "low": "red"}


def _record_line(record: ManagedRecord) -> str:
    return f"{_plain(record.record_type)} {record.full_domain} -> {record.target_value}"


class DNSManager:
    """Main class that orchestrates the whole analysis process."""

    def __init__(self, config: Dict, store: Optional[RecordStore] = None):
        """Initialize the manager with configuration."""
        self.config = config or {}
        self.dns_client = DNSClient(self.config)
        self.record_manager = RecordManager()
        self.classifier = Classifier()
        if store is None:
            store_path = (self.config.get("store") or {}).get("path", DEFAULT_STORE_PATH)
            store = YAMLRecordStore(store_path)
        self.store = store

    def _collect_records(
        self, provider_ids: Optional[Sequence[int]] = None
    ) -> Tuple[List[Tuple[ProviderInfo, List[SyncedRecord]]], Dict[int, ProviderSyncSummary]]:
        """Sync the selected providers, recording failures instead of aborting."""
        providers = self.dns_client.providers
        if provider_ids is not None:
            providers = [self.dns_client.get_provider(pid) for pid in provider_ids]

        batches = []
        summaries = {}
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Syncing providers...", total=len(providers))
            for provider in providers:
                summaries[provider.id] = ProviderSyncSummary(
                    provider_id=provider.id, provider_name=provider.name
                )
                try:
                    records = self.dns_client.sync_records(provider.id)
                    batches.append((provider, records))
                    logger.info(f"Synced {len(records)} records from provider {provider.id}")
                except Exception as e:
                    logger.error(f"Failed to sync provider {provider.id}: {e}")
                    summaries[provider.id].errors.append(f"sync: {e}")
                    console.print(f"[red]Failed to sync {provider.name}: {e}[/red]")
                progress.update(task, advance=1)

        return batches, summaries

    def analyze(
        self,
        provider_ids: Optional[Sequence[int]] = None,
        output_file: Optional[str] = None,
    ) -> List[ServerSuggestion]:
        """Sync providers and suggest servers without touching the store."""
        batches, _ = self._collect_records(provider_ids)
        records = [record for _, synced in batches for record in synced]
        console.print(f"[blue]Analyzing {len(records)} records...[/blue]")

        suggestions = self.classifier.classify(records)
        self._display_suggestions(suggestions)

        if output_file:
            self._save_output(
                {
                    "records": [r.to_dict() for r in records],
                    "server_suggestions": [s.to_dict() for s in suggestions],
                },
                output_file,
            )
        return suggestions

    def reanalyze(self, dry_run: bool = False) -> Dict:
        """Re-sync every provider, re-classify, and flag suggested servers."""
        batches, summaries = self._collect_records()

        records = self.store.load_records()
        all_synced = []
        for provider, synced in batches:
            result = self.record_manager.sync_records(records, provider, synced)
            result.errors = summaries[provider.id].errors + result.errors
            summaries[provider.id] = result
            all_synced.extend(synced)

        console.print(f"[blue]Analyzing {len(all_synced)} records...[/blue]")
        suggestions = self.classifier.classify(all_synced)
        updated = self.record_manager.apply_suggestions(records, suggestions)

        provider_summaries = [summaries[p.id] for p in self.dns_client.providers if p.id in summaries]
        self._display_sync_summary(provider_summaries)

        if dry_run:
            console.print("[yellow]DRY RUN MODE - Record store not modified[/yellow]")
        else:
            self.store.save_providers(self.dns_client.providers)
            self.store.save_records(records)
            console.print(f"[green]Updated {updated} records as servers[/green]")

        return {
            "message": "Re-analysis completed",
            "suggestions": len(suggestions),
            "updated": updated,
            "providers": [s.to_dict() for s in provider_summaries],
            "total_synced": len(all_synced),
        }

    def topology(self, output_file: Optional[str] = None) -> GroupedTopology:
        """Build the server-first view from the record store."""
        records = [r for r in self.store.load_records() if r.managed]
        providers = self.store.load_providers() or self.dns_client.providers

        grouped = build_topology(records, providers)
        self._display_topology(grouped)

        if output_file:
            self._save_output(grouped.to_dict(), output_file)
        return grouped

    def hide(self, record_id: int) -> ManagedRecord:
        """Stop managing a record."""
        records = self.store.load_records()
        record = self.record_manager.hide_record(records, record_id)
        self.store.save_records(records)
        console.print(f"[green]Record {record.full_domain} hidden from management[/green]")
        return record

    def set_status(self, record_id: int, enabled: bool) -> ManagedRecord:
        """Enable or disable a record at providers that support it."""
        records = self.store.load_records()
        providers = self.store.load_providers() or self.dns_client.providers
        record = self.record_manager.set_record_status(records, record_id, enabled, providers)
        self.store.save_records(records)
        state = "enabled" if enabled else "disabled"
        console.print(f"[green]Record {record.full_domain} {state}[/green]")
        return record

    def _display_suggestions(self, suggestions: Sequence[ServerSuggestion]):
        """Display the server suggestions."""
        table = Table(title="Server Suggestions")
        table.add_column("Confidence", style="cyan")
        table.add_column("Domain", style="white")
        table.add_column("IP", style="magenta")
        table.add_column("Name", style="white")
        table.add_column("Region", style="white")
        table.add_column("Reason", style="white")

        for suggestion in suggestions:
            confidence = suggestion.confidence.value
            style = CONFIDENCE_STYLES.get(confidence, "white")
            table.add_row(
                f"[{style}]{confidence}[/{style}]",
                suggestion.domain or ", ".join(suggestion.same_ip_domains),
                suggestion.ip,
                suggestion.suggested_name,
                suggestion.suggested_region,
                suggestion.match_reason,
            )

        console.print(table)
        console.print(f"\n[bold]Total suggestions: {len(suggestions)}[/bold]")

    def _display_sync_summary(self, summaries: Sequence[ProviderSyncSummary]):
        """Display per-provider sync counts."""
        table = Table(title="Sync Summary")
        table.add_column("Provider", style="cyan")
        for column in ("Synced", "Created", "Updated", "Reimported", "Kept Hidden"):
            table.add_column(column, style="magenta")
        table.add_column("Errors", style="red")

        for summary in summaries:
            table.add_row(
                summary.provider_name,
                str(summary.synced),
                str(summary.created),
                str(summary.updated),
                str(summary.reimported),
                str(summary.kept_hidden),
                "; ".join(summary.errors),
            )

        console.print(table)

    def _display_topology(self, grouped: GroupedTopology):
        """Display the grouped records as a tree."""
        tree = Tree("[bold]DNS Topology[/bold]")

        servers = tree.add(f"[green]Servers ({len(grouped.servers)})[/green]")
        for group in grouped.servers:
            server = group.server
            label = f"{server.full_domain} -> {server.target_value}"
            details = " ".join(v for v in (server.server_name, server.server_region) if v)
            if details:
                label += f" [cyan]({details})[/cyan]"
            branch = servers.add(label)
            for record in group.related_records:
                branch.add(_record_line(record))

        unassigned = tree.add("[yellow]Unassigned[/yellow]")
        for group in grouped.unassigned_records:
            branch = unassigned.add(f"{group.provider_name or group.provider_id} ({len(group.records)})")
            for record in group.records:
                branch.add(_record_line(record))

        console.print(tree)

    def _save_output(self, payload: Dict, output_file: str):
        """Save a result payload as JSON or YAML, chosen by file suffix."""
        path = Path(output_file)
        payload = dict(payload, generated_at=datetime.now().isoformat(timespec="seconds"))
        with open(path, "w") as f:
            if path.suffix in (".yaml", ".yml"):
                yaml.safe_dump(payload, f, sort_keys=False, allow_unicode=True)
            else:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        logger.info(f"Output saved to: {output_file}")
        console.print(f"[green]Output saved to: {output_file}[/green]")
