"""
Step definitions for topology grouping and reanalysis.
"""

from behave import given, then, when

from dnsmesh.core.dns_manager import DNSManager
from dnsmesh.core.models import ManagedRecord
from dnsmesh.core.topology import build_topology
from dnsmesh.store.record_store import InMemoryRecordStore


def _split(names):
    return [name.strip() for name in names.split(",") if name.strip()]


def _provider_by_name(context, name):
    return next(p for p in context.providers if p.name == name)


@given("the managed records")
def step_impl(context):
    """Build managed records from the scenario table."""
    context.managed_records = [
        ManagedRecord(
            id=int(row["id"]),
            provider_id=int(row["provider"]),
            zone_id="z1",
            zone_name="example.com",
            full_domain=row["domain"],
            record_type=row["type"],
            target_value=row["target"],
            is_server=row["server"] == "yes",
            server_name=row["server_name"],
        )
        for row in context.table
    ]


@given("a configuration with static records")
def step_impl(context):
    """Configure one static source per provider from the scenario table."""
    records = {}
    for row in context.table:
        records.setdefault(int(row["provider"]), []).append(
            {
                "zone_id": "z1",
                "zone_name": row["domain"].split(".", 1)[1],
                "full_domain": row["domain"],
                "record_type": row["type"],
                "target_value": row["target"],
            }
        )

    context.dns_config = {
        "providers": [
            {
                "id": provider.id,
                "name": provider.name,
                "type": provider.provider_type.value,
                "source": {"kind": "static", "records": records.get(provider.id, [])},
            }
            for provider in context.providers
        ]
    }
    context.store = InMemoryRecordStore()
    context.dns_manager = DNSManager(context.dns_config, store=context.store)


@when("I reanalyze the providers")
def step_impl(context):
    """Sync, classify and persist."""
    context.result = context.dns_manager.reanalyze()
    assert context.result["updated"] > 0


@when("I build the topology")
def step_impl(context):
    """Group the managed records."""
    context.grouped = build_topology(context.managed_records, context.providers)


@when("I build the topology from the store")
def step_impl(context):
    """Group the records held in the record store."""
    context.grouped = context.dns_manager.topology()


@then("there should be {count:d} server group")
@then("there should be {count:d} server groups")
def step_impl(context, count):
    """Check the number of server groups."""
    assert len(context.grouped.servers) == count, context.grouped.to_dict()


@then('server group {index:d} should be "{domain}"')
def step_impl(context, index, domain):
    """Check the primary server of a group."""
    server = context.grouped.servers[index - 1].server
    assert server.full_domain == domain, f"Expected {domain}, got {server.full_domain}"


@then('server group {index:d} should contain "{names}"')
def step_impl(context, index, names):
    """Check the records attached to a server."""
    related = [r.full_domain for r in context.grouped.servers[index - 1].related_records]
    assert related == _split(names), related


@then('provider "{name}" should have unassigned "{names}"')
def step_impl(context, name, names):
    """Check the leftover records of a provider."""
    provider = _provider_by_name(context, name)
    group = next(g for g in context.grouped.unassigned_records if g.provider_id == provider.id)
    assert group.provider_name == name
    assert [r.full_domain for r in group.records] == _split(names)


@then('provider "{name}" should support status toggling')
def step_impl(context, name):
    provider = _provider_by_name(context, name)
    assert context.grouped.provider_capabilities[provider.id].supports_record_status_toggle


@then('provider "{name}" should not support status toggling')
def step_impl(context, name):
    provider = _provider_by_name(context, name)
    assert not context.grouped.provider_capabilities[provider.id].supports_record_status_toggle
