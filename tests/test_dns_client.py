import dns.exception

from mail_posture.utils.dns import DnsClient
from mail_posture.utils.ledger import QueryLedger


class _TxtAnswer:
    def __init__(self, *strings):
        self.strings = strings


class _Name:
    def __init__(self, value):
        self.value = value

    def to_text(self, omit_final_dot=False):
        return self.value.rstrip(".") if omit_final_dot else self.value


class _MxAnswer:
    def __init__(self, preference, exchange):
        self.preference = preference
        self.exchange = _Name(exchange)


def test_txt_strings_are_concatenated(monkeypatch):
    calls = []

    def fake_resolve(name, record_type, lifetime=None):
        calls.append((name, record_type, lifetime))
        return [_TxtAnswer(b"v=spf1 include:_spf.google.com ", b"-all")]

    monkeypatch.setattr("dns.resolver.resolve", fake_resolve)
    client = DnsClient(timeout_seconds=2.5)
    assert client.resolve_txt("example.com") == ["v=spf1 include:_spf.google.com -all"]
    assert calls == [("example.com", "TXT", 2.5)]


def test_mx_formatted_as_priority_and_exchange(monkeypatch):
    monkeypatch.setattr(
        "dns.resolver.resolve",
        lambda name, record_type, lifetime=None: [_MxAnswer(10, "mx1.example.com."), _MxAnswer(20, "mx2.example.com.")],
    )
    assert DnsClient().resolve_mx("example.com") == ["10 mx1.example.com", "20 mx2.example.com"]


def test_resolution_errors_yield_empty_list(monkeypatch):
    def timeout(*args, **kwargs):
        raise dns.exception.Timeout()

    monkeypatch.setattr("dns.resolver.resolve", timeout)
    ledger = QueryLedger()
    client = DnsClient(ledger=ledger)
    assert client.resolve_txt("slow.example.com") == []
    assert client.resolve_mx("slow.example.com") == []

    totals = ledger.totals()
    assert totals["counts"] == {"TXT": 1, "MX": 1}
    assert totals["errors"] == {"TXT": 1, "MX": 1}
    assert ledger.entries[0].query_name == "slow.example.com"
    assert "Timeout" in ledger.entries[0].error


def test_ledger_records_successful_queries(monkeypatch):
    monkeypatch.setattr("dns.resolver.resolve", lambda *args, **kwargs: [_TxtAnswer(b"v=BIMI1;")])
    ledger = QueryLedger()
    DnsClient(ledger=ledger).resolve_txt("default._bimi.example.com")
    entry = ledger.entries[0]
    assert entry.status == "ok"
    assert entry.answers == 1
    assert ledger.to_dict()["totals"]["total_entries"] == 1
