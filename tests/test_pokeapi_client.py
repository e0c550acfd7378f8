#!/usr/bin/env python3
"""
Tests for the PokeAPI client and the records it builds.

Run with:
    python -m pytest tests/test_pokeapi_client.py
"""
import os
import sys
import unittest
from unittest.mock import MagicMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import requests

from app.models import EntryDetail, EntrySummary, parse_entry_id
from pokeapi_client import PokeAPIClient, PokeAPIError


# ===========================================================================
# Helpers
# ===========================================================================

def _ok_resp(body):
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = body
    resp.raise_for_status.return_value = None
    return resp


def _err_resp(status=500):
    resp = MagicMock()
    resp.status_code = status
    resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


def _detail_body(name='pikachu', entry_id=25, types=('electric',), artwork='https://img/25.png'):
    return {
        'id': entry_id,
        'name': name,
        'height': 4,
        'weight': 60,
        'types': [{'slot': i + 1, 'type': {'name': t, 'url': ''}} for i, t in enumerate(types)],
        'sprites': {
            'front_default': 'https://img/front/25.png',
            'other': {'official-artwork': {'front_default': artwork}},
        },
    }


LIST_BODY = {
    'count': 1302,
    'next': 'https://pokeapi.co/api/v2/pokemon?offset=3&limit=3',
    'results': [
        {'name': 'bulbasaur', 'url': 'https://pokeapi.co/api/v2/pokemon/1/'},
        {'name': 'ivysaur', 'url': 'https://pokeapi.co/api/v2/pokemon/2/'},
        {'name': 'venusaur', 'url': 'https://pokeapi.co/api/v2/pokemon/3/'},
    ],
}


# ===========================================================================
# Records
# ===========================================================================

class TestParseEntryId(unittest.TestCase):

    def test_trailing_slash(self):
        self.assertEqual(parse_entry_id('https://pokeapi.co/api/v2/pokemon/25/'), 25)

    def test_no_trailing_slash(self):
        self.assertEqual(parse_entry_id('https://pokeapi.co/api/v2/pokemon/25'), 25)

    def test_slash_variants_agree(self):
        url = 'https://pokeapi.co/api/v2/pokemon/151'
        self.assertEqual(parse_entry_id(url), parse_entry_id(url + '/'))

    def test_deterministic(self):
        url = 'https://pokeapi.co/api/v2/pokemon/7/'
        self.assertEqual({parse_entry_id(url) for _ in range(5)}, {7})

    def test_non_numeric_segment_raises(self):
        with self.assertRaises(ValueError):
            parse_entry_id('https://pokeapi.co/api/v2/pokemon/pikachu/')

    def test_empty_raises(self):
        with self.assertRaises(ValueError):
            parse_entry_id('')


class TestEntrySummary(unittest.TestCase):

    def test_id_and_image_url(self):
        entry = EntrySummary('charmander', 'https://pokeapi.co/api/v2/pokemon/4/')
        self.assertEqual(entry.id, 4)
        self.assertTrue(entry.image_url.endswith('/official-artwork/4.png'))

    def test_malformed_url_fails_at_construction(self):
        with self.assertRaises(ValueError):
            EntrySummary('missingno', 'https://pokeapi.co/api/v2/pokemon/')

    def test_from_json(self):
        entry = EntrySummary.from_json({'name': 'mew', 'url': 'https://pokeapi.co/api/v2/pokemon/151/'})
        self.assertEqual(entry.name, 'mew')
        self.assertEqual(entry.id, 151)

    def test_immutable(self):
        entry = EntrySummary('mew', 'https://pokeapi.co/api/v2/pokemon/151/')
        with self.assertRaises(Exception):
            entry.name = 'mewtwo'  # type: ignore[misc]


class TestEntryDetail(unittest.TestCase):

    def test_from_json(self):
        detail = EntryDetail.from_json(_detail_body(types=('grass', 'poison')))
        self.assertEqual(detail.id, 25)
        self.assertEqual(detail.height_decimetres, 4)
        self.assertEqual(detail.weight_decagrams, 60)
        self.assertEqual(detail.categories, ('grass', 'poison'))
        self.assertEqual(detail.artwork_url, 'https://img/25.png')

    def test_unit_conversions(self):
        detail = EntryDetail.from_json(_detail_body())
        self.assertAlmostEqual(detail.height_metres, 0.4)
        self.assertAlmostEqual(detail.weight_kilograms, 6.0)

    def test_missing_artwork_becomes_empty(self):
        detail = EntryDetail.from_json(_detail_body(artwork=None))
        self.assertEqual(detail.artwork_url, '')

    def test_missing_key_raises(self):
        body = _detail_body()
        del body['sprites']
        with self.assertRaises(KeyError):
            EntryDetail.from_json(body)


# ===========================================================================
# PokeAPIClient
# ===========================================================================

class TestPokeAPIClient(unittest.TestCase):

    def _client(self, session):
        return PokeAPIClient('https://pokeapi.co/api/v2/', timeout=5, session=session)

    def test_base_url_trailing_slash_stripped(self):
        self.assertEqual(self._client(MagicMock()).base_url, 'https://pokeapi.co/api/v2')

    def test_get_entry_list(self):
        session = MagicMock()
        session.get.return_value = _ok_resp(LIST_BODY)
        entries = self._client(session).get_entry_list(151)
        self.assertEqual([e.name for e in entries], ['bulbasaur', 'ivysaur', 'venusaur'])
        self.assertEqual([e.id for e in entries], [1, 2, 3])
        session.get.assert_called_once_with(
            'https://pokeapi.co/api/v2/pokemon', params={'limit': 151}, timeout=5
        )

    def test_get_entry_list_http_error(self):
        session = MagicMock()
        session.get.return_value = _err_resp(503)
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_list()

    def test_get_entry_list_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError('offline')
        with self.assertRaises(PokeAPIError) as ctx:
            self._client(session).get_entry_list()
        self.assertIn('pokemon', ctx.exception.url)

    def test_fractional_timeout_passed_to_session(self):
        session = MagicMock()
        session.get.return_value = _ok_resp(LIST_BODY)
        PokeAPIClient(timeout=2.5, session=session).get_entry_list(3)
        self.assertEqual(session.get.call_args.kwargs['timeout'], 2.5)

    def test_request_value_error_not_reported_as_json(self):
        session = MagicMock()
        session.get.side_effect = ValueError('Timeout value connect was 0')
        with self.assertRaises(ValueError) as ctx:
            self._client(session).get_entry_list()
        self.assertNotIsInstance(ctx.exception, PokeAPIError)

    def test_get_entry_list_invalid_json(self):
        resp = _ok_resp(None)
        resp.json.side_effect = ValueError('No JSON object could be decoded')
        session = MagicMock()
        session.get.return_value = resp
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_list()

    def test_get_entry_list_missing_results(self):
        session = MagicMock()
        session.get.return_value = _ok_resp({'count': 0})
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_list()

    def test_get_entry_list_malformed_url(self):
        session = MagicMock()
        session.get.return_value = _ok_resp({'results': [{'name': 'x', 'url': 'https://pokeapi.co/api/v2/pokemon/x/'}]})
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_list()

    def test_get_entry_list_non_object_body(self):
        session = MagicMock()
        session.get.return_value = _ok_resp([1, 2, 3])
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_list()

    def test_get_entry_detail(self):
        session = MagicMock()
        session.get.return_value = _ok_resp(_detail_body())
        detail = self._client(session).get_entry_detail('pikachu')
        self.assertEqual(detail.name, 'pikachu')
        self.assertEqual(detail.categories, ('electric',))
        session.get.assert_called_once_with(
            'https://pokeapi.co/api/v2/pokemon/pikachu', params=None, timeout=5
        )

    def test_get_entry_detail_not_found(self):
        session = MagicMock()
        session.get.return_value = _err_resp(404)
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_detail('agumon')

    def test_get_entry_detail_malformed(self):
        body = _detail_body()
        del body['types']
        session = MagicMock()
        session.get.return_value = _ok_resp(body)
        with self.assertRaises(PokeAPIError):
            self._client(session).get_entry_detail('pikachu')

    @patch('pokeapi_client.requests.Session')
    def test_default_session_created(self, mock_session_cls):
        mock_session_cls.return_value = MagicMock()
        client = PokeAPIClient()
        self.assertIs(client.session, mock_session_cls.return_value)


if __name__ == '__main__':
    unittest.main()
