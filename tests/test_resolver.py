import io
import threading

import pytest

from netrc_resolve import (
    InvalidHostError,
    NetrcResolver,
    NetrcSourceError,
    RawNetrcResolver,
    RawRecord,
    ValidatedEntry,
)

COM = 'example.com'
ORG = 'example.org'
UNI = 'xn--9ca.com'
IP1 = '1.1.1.1'
IP2 = '2.2.2.2.'


def found(netrc, host, login, password):
    entry = NetrcResolver(io.BytesIO(netrc.encode())).lookup(host)
    assert entry == ValidatedEntry(login=login, password=password)


def notfound(netrc, host):
    assert NetrcResolver(io.BytesIO(netrc.encode())).lookup(host) is None


def raw(netrc, host):
    return RawNetrcResolver(io.BytesIO(netrc.encode())).lookup(host)


class OneShotSource:
    """Returns its data once; any further read fails."""

    def __init__(self, data):
        self.data = data
        self.reads = 0

    def read(self):
        self.reads += 1
        if self.reads > 1:
            raise OSError('source already drained')
        return self.data


class FailingSource:
    def read(self):
        raise OSError('disk on fire')


def test_raw_simple_config():
    text = '\nmachine example.com\nlogin user\npassword pass\naccount acc\n'
    assert raw(text, COM) == RawRecord(login='user', password='pass', account='acc')
    for host in (ORG, UNI, IP1):
        assert raw(text, host) is None


def test_raw_empty_machine():
    assert raw('machine example.com', COM) == RawRecord()
    assert raw('machine example.com', ORG) is None


def test_raw_falls_back_to_default():
    assert raw('default login d', ORG) == RawRecord(login='d')


def test_simple_config():
    text = 'machine example.com\nlogin user\npassword pass\n'
    found(text, COM, 'user', 'pass')
    notfound(text, ORG)
    notfound(text, UNI)
    notfound(text, IP1)


def test_multiple_records():
    text = 'machine example.com login user password pass\nmachine example.org login foo password bar\n'
    found(text, COM, 'user', 'pass')
    found(text, ORG, 'foo', 'bar')
    notfound(text, UNI)


def test_unicode_host():
    text = 'machine É.com login user password pass'
    found(text, UNI, 'user', 'pass')
    found(text, 'É.com', 'user', 'pass')
    notfound(text, COM)


def test_missing_password():
    notfound('machine example.com login user', COM)


def test_missing_user_never_mixes_with_default():
    text = 'machine example.com password pass\ndefault login user\n'
    found(text, COM, None, 'pass')
    notfound(text, ORG)


def test_default_password_missing_user():
    text = 'machine example.com password pass\ndefault password def\n'
    found(text, COM, None, 'pass')
    found(text, ORG, None, 'def')


@pytest.mark.parametrize('text', [
    'machine example.com login ex password am\ndefault login def password ault\n',
    'default login def password ault\nmachine example.com login ex password am\n',
])
def test_default_first_or_last(text):
    found(text, COM, 'ex', 'am')
    found(text, ORG, 'def', 'ault')


def test_account_fallback():
    found('machine example.com account acc password pass', COM, 'acc', 'pass')


def test_login_preferred_over_account():
    text = (
        'machine example.com password pass login log account acc\n'
        'machine example.org password pass account acc login log\n'
    )
    found(text, COM, 'log', 'pass')
    found(text, ORG, 'log', 'pass')


def test_ip_hosts():
    text = 'machine 1.1.1.1 login us password pa'
    found(text, IP1, 'us', 'pa')
    notfound(text, IP2)
    notfound(text, COM)


def test_non_dotted_ip():
    text = 'machine 16843009 login us password pa'
    found(text, IP1, 'us', 'pa')
    notfound(text, IP2)


def test_malformed_file():
    notfound("I'm a malformed netrc!", COM)


def test_commented_out_machine():
    text = '# machine example.com login user password pass\nmachine example.org login lo password pa\n'
    notfound(text, COM)
    found(text, ORG, 'lo', 'pa')


def test_octothorpe_in_value():
    found('machine example.com login #!@$ password pass', COM, '#!@$', 'pass')


def test_sudden_end():
    notfound('machine example.com login', COM)


def test_incomplete_entry_does_not_use_default():
    text = 'machine example.com login user\ndefault login u password p\n'
    notfound(text, COM)
    found(text, ORG, 'u', 'p')


def test_unknown_token():
    notfound('machine example.com\nlogin user\nfoo bar\npassword pass\n', COM)


def test_macro():
    text = (
        'macdef foo\n'
        'machine example.com login mac password def\n'
        'qux\n'
        '\n'
        'machine example.com login user password pass\n'
    )
    found(text, COM, 'user', 'pass')
    notfound(text, ORG)


def test_unterminated_macro():
    text = (
        'macdef foo\n'
        'machine example.com login mac password def\n'
        'qux\n'
        'machine example.com login user password pass'
    )
    notfound(text, COM)


def test_macro_blank_line_before_name():
    notfound('macdef\n\nfoo\nmachine example.com login mac password def', COM)


def test_tokens_across_many_lines():
    found('machine\nexample.com\nlogin\n\nuser\npassword\npass\n', COM, 'user', 'pass')


def test_strange_whitespace():
    text = 'machine\u2029ok\u00e9\t\u2029login  u   password  p\t\t\t\r\n'
    notfound(text, COM)
    found(text, 'ok\u00e9', 'u', 'p')


def test_nothing_found_without_default():
    notfound('', COM)
    assert raw('', COM) is None


def test_lookup_accepts_parsed_host():
    from netrc_resolve import parse_host
    found('machine example.com password p', parse_host('EXAMPLE.com'), None, 'p')


def test_invalid_query_host_raises():
    resolver = NetrcResolver(io.BytesIO(b'default password p'))
    with pytest.raises(InvalidHostError):
        resolver.lookup('exa mple.com')


def test_source_read_once():
    source = OneShotSource(b'machine example.com login u password p')
    resolver = NetrcResolver(source)
    first = resolver.lookup(COM)
    assert resolver.lookup(COM) == first
    assert resolver.lookup(ORG) is None
    assert source.reads == 1


def test_source_error():
    with pytest.raises(NetrcSourceError):
        RawNetrcResolver(FailingSource()).lookup(COM)


def test_decode_error():
    with pytest.raises(NetrcSourceError):
        NetrcResolver(io.BytesIO(b'machine \xff\xfe')).lookup(COM)


def test_missing_file(tmp_path):
    with pytest.raises(NetrcSourceError):
        NetrcResolver.from_path(tmp_path / 'nope').lookup(COM)


def test_from_path(tmp_path):
    path = tmp_path / '.netrc'
    path.write_text('machine example.com login u password p\n', encoding='utf-8')
    resolver = NetrcResolver.from_path(path)
    assert resolver.lookup(COM) == ValidatedEntry(login='u', password='p')
    path.unlink()
    assert resolver.lookup(COM) == ValidatedEntry(login='u', password='p')


def test_concurrent_first_lookup_parses_once():
    source = OneShotSource(b'machine example.com password p')
    resolver = RawNetrcResolver(source)
    results = []
    threads = [threading.Thread(target=lambda: results.append(resolver.lookup(COM))) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == [RawRecord(password='p')] * 8
    assert source.reads == 1


def test_control_separator_keeps_machine_glued():
    notfound('machine\x1fexample.com login u password p', COM)
