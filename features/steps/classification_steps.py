"""
Step definitions for server classification.
"""

from behave import given, then, when

from dnsmesh.core.classifier import classify
from dnsmesh.core.models import SyncedRecord


def _split(names):
    return [name.strip() for name in names.split(",") if name.strip()]


@given("the synced records")
def step_impl(context):
    """Build synced records from the scenario table."""
    context.synced_records = [
        SyncedRecord(
            zone_id="z1",
            zone_name="example.com",
            full_domain=row["domain"],
            record_type=row["type"],
            target_value=row["target"],
        )
        for row in context.table
    ]


@when("I classify the records")
def step_impl(context):
    """Run the classifier."""
    context.suggestions = classify(context.synced_records)


@then("there should be {count:d} suggestion")
@then("there should be {count:d} suggestions")
def step_impl(context, count):
    """Check the number of suggestions."""
    assert len(context.suggestions) == count, (
        f"Expected {count} suggestions, got {[s.to_dict() for s in context.suggestions]}"
    )


@then('suggestion {index:d} should be "{domain}" with "{confidence}" confidence')
def step_impl(context, index, domain, confidence):
    """Check the suggested domain and its confidence."""
    suggestion = context.suggestions[index - 1]
    assert suggestion.domain == domain, f"Expected {domain}, got {suggestion.domain}"
    assert suggestion.confidence.value == confidence


@then('suggestion {index:d} should be keyed by IP "{ip}" with "{confidence}" confidence')
def step_impl(context, index, ip, confidence):
    """Check an IP-keyed suggestion."""
    suggestion = context.suggestions[index - 1]
    assert suggestion.domain == ""
    assert suggestion.ip == ip
    assert suggestion.confidence.value == confidence


@then('suggestion {index:d} should be referenced by "{names}"')
def step_impl(context, index, names):
    """Check the CNAME back references."""
    suggestion = context.suggestions[index - 1]
    assert suggestion.referenced_by == _split(names), suggestion.referenced_by


@then('suggestion {index:d} should list the domains "{names}"')
def step_impl(context, index, names):
    """Check the domains sharing the suggested IP."""
    suggestion = context.suggestions[index - 1]
    assert suggestion.same_ip_domains == _split(names), suggestion.same_ip_domains


@then('suggestion {index:d} should be named "{name}" in "{region}"')
def step_impl(context, index, name, region):
    """Check the derived server name and region."""
    suggestion = context.suggestions[index - 1]
    assert suggestion.suggested_name == name
    assert suggestion.suggested_region == region
