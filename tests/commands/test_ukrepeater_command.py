"""Tests for ukrepeater.commands.ukrepeater_command."""

from unittest.mock import Mock

import pytest

from ukrepeater.commands.ukrepeater_command import UKRepeaterCommand
from ukrepeater.errors import ConnectError, HTTPNotFoundError, UnexpectedStatusError
from ukrepeater.lookup import LookupContext, RepeaterLookup
from ukrepeater.models import RESPONSE_TYPE_EPHEMERAL, CommandArgs
from ukrepeater.rate_limiter import RefreshThrottle
from tests.helpers import TEST_API_URL, create_test_repeater, create_test_repeater_list, to_body

UPDATE_URL = f"{TEST_API_URL}/update"


@pytest.fixture
def cmd(command_mock_bot, repeater_lookup):
    return UKRepeaterCommand(command_mock_bot, repeater_lookup=repeater_lookup)


class TestUKRepeaterCommandSetup:
    """Tests for construction and metadata."""

    def test_config_section(self, cmd):
        assert cmd.config_section == "UKRepeater_Command"

    def test_can_execute_when_enabled(self, cmd):
        assert cmd.can_execute(CommandArgs("/ukrepeater gb3wr")) is True

    def test_can_execute_when_disabled(self, command_mock_bot, repeater_lookup):
        command_mock_bot.config.set("UKRepeater_Command", "enabled", "false")
        cmd = UKRepeaterCommand(command_mock_bot, repeater_lookup=repeater_lookup)
        assert cmd.can_execute(CommandArgs("/ukrepeater gb3wr")) is False

    def test_builds_lookup_from_config(self, command_mock_bot):
        cmd = UKRepeaterCommand(command_mock_bot)
        try:
            assert cmd.repeater_lookup.context.base_url == TEST_API_URL
            assert cmd.repeater_lookup.context.refresh_interval == 86400
            assert "re" not in cmd.prefix_table
        finally:
            cmd.close()

    def test_missing_api_fails_activation(self, command_mock_bot):
        command_mock_bot.config.remove_option("UKRepeater_Command", "api")
        with pytest.raises(ValueError):
            UKRepeaterCommand(command_mock_bot)

    def test_refresh_command_enables_re_prefix(self, command_mock_bot):
        command_mock_bot.config.set("UKRepeater_Command", "refresh_command", "true")
        cmd = UKRepeaterCommand(command_mock_bot)
        try:
            assert "re" in cmd.prefix_table
        finally:
            cmd.close()

    def test_help_text(self, cmd):
        assert cmd.get_help_text().startswith("Usage: ukrepeater <callsign|locator>")


class TestInputValidation:
    """Tests for command line checks that need no network."""

    @pytest.mark.parametrize("command", ["", "/ukrepeater", "/ukrepeater g", "/ukrepeater  "])
    def test_too_short(self, cmd, fake_client, command):
        assert cmd.handle(command) == "No query given, enter a callsign or locator to search for!"
        assert fake_client.requested == []

    def test_long_single_word_has_no_query(self, cmd, fake_client):
        assert cmd.handle("/ukrepeatergb3wr") == "No query given, enter a callsign or locator to search for!"
        assert fake_client.requested == []

    @pytest.mark.parametrize("argument", ["gb3wr!", "gb3wrxx", "gb-3wr", "io91.w", "gb3²", "gb①wr"])
    def test_invalid_argument(self, cmd, fake_client, argument):
        assert cmd.handle(f"/ukrepeater {argument}") == "Invalid query, use 1-6 letters or digits!"
        assert fake_client.requested == []

    def test_one_character_query_too_short(self, cmd, fake_client):
        assert cmd.handle("/ukrepeater g ") == "Command is not long enough!: g"
        assert fake_client.requested == []

    def test_unknown_prefix(self, cmd, fake_client):
        assert cmd.handle("/ukrepeater m0abc") == "Command is not known: m0, Full: m0abc"
        assert fake_client.requested == []

    def test_unknown_prefix_when_refresh_disabled(self, cmd, fake_client):
        assert cmd.handle("/ukrepeater reload") == "Command is not known: re, Full: reload"
        assert fake_client.requested == []

    def test_extra_fields_ignored(self, cmd, fake_client):
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3wr", to_body(create_test_repeater()))
        assert cmd.handle("/ukrepeater gb3wr please").startswith("Name: GB3WR")


class TestAprs:
    """Tests for APRS passcode replies."""

    @pytest.mark.parametrize("keyword", ["aprs", "APRS", "Aprs"])
    def test_passcode(self, cmd, fake_client, keyword):
        assert cmd.handle(f"/ukrepeater {keyword} n0call") == "Your APRS password is: 13023"
        assert fake_client.requested == []

    def test_no_callsign_gives_empty_reply(self, cmd, fake_client):
        assert cmd.handle("/ukrepeater aprs  ") == ""
        assert fake_client.requested == []

    def test_overlong_callsign_gives_empty_reply(self, cmd):
        assert cmd.handle("/ukrepeater aprs m0abcdefghij") == ""


class TestLookups:
    """Tests for lookups routed through the repeater API."""

    def test_callsign_lookup(self, cmd, fake_client):
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3wr", to_body(create_test_repeater()))
        text = cmd.handle("/ukrepeater GB3WR")
        assert text.startswith("Name: GB3WR\nMode: [FM]\n")
        assert text.endswith("Last DB update: 2 days ago\n\nAPI Provided by Rik M7GMT")
        assert fake_client.requested == [UPDATE_URL, f"{TEST_API_URL}/repeater/gb3wr"]

    def test_locator_lookup(self, cmd, fake_client):
        data = create_test_repeater_list([create_test_repeater(name="GB3WR"), create_test_repeater(name="MB7IBS")])
        fake_client.respond(f"{TEST_API_URL}/findbylocator/io81qe", to_body(data))
        text = cmd.handle("/ukrepeater IO81QE")
        assert text.startswith("[1]\nName: GB3WR\n")
        assert "[2]\nName: MB7IBS\n" in text

    def test_repeater_not_found(self, cmd):
        assert cmd.handle("/ukrepeater gb3zz") == "Repeater not found!"

    def test_repeaters_not_found(self, cmd):
        assert cmd.handle("/ukrepeater jo01") == "Repeaters not found!"

    def test_http_404(self, cmd, fake_client):
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3zz", HTTPNotFoundError())
        assert cmd.handle("/ukrepeater gb3zz") == "Error: Not found"

    def test_unexpected_status(self, cmd, fake_client, command_mock_bot):
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3wr", UnexpectedStatusError(502))
        assert cmd.handle("/ukrepeater gb3wr") == "Error: Unexpected status code received from server"
        command_mock_bot.logger.warning.assert_called()

    def test_bad_body(self, cmd, fake_client):
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3wr", b'{"name": 12}')
        assert cmd.handle("/ukrepeater gb3wr").startswith("Error extracting repeater data response: ")

    def test_out_of_range_coordinate(self, cmd, fake_client):
        body = b'{"name": "GB3WR", "location": {"lat": 1' + b"0" * 400 + b"}}"
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3wr", body)
        assert cmd.handle("/ukrepeater gb3wr").startswith("Error extracting repeater data response: ")

    def test_refresh_failure(self, cmd, fake_client):
        fake_client.respond(UPDATE_URL, ConnectError())
        assert cmd.handle("/ukrepeater gb3wr") == "There was an issue updating: Error contacting API"
        assert fake_client.requested == [UPDATE_URL]

    def test_refresh_throttled_across_invocations(self, cmd, fake_client, fake_clock):
        fake_client.default = to_body(create_test_repeater())
        cmd.handle("/ukrepeater gb3wr")
        fake_clock.advance(60)
        cmd.handle("/ukrepeater io81")
        assert fake_client.count(UPDATE_URL) == 1

    def test_unexpected_exception_is_reported(self, cmd, command_mock_bot):
        cmd.repeater_lookup = Mock()
        cmd.repeater_lookup.lookup.side_effect = RuntimeError("boom")
        assert cmd.handle("/ukrepeater gb3wr") == UKRepeaterCommand.UNEXPECTED_ERROR
        command_mock_bot.logger.error.assert_called()


class TestRefreshCommand:
    """Tests for the 're' prefix when enabled."""

    @pytest.fixture
    def refresh_cmd(self, command_mock_bot, fake_client, fake_clock, mock_logger):
        context = LookupContext(base_url=TEST_API_URL, refresh_command=True)
        throttle = RefreshThrottle(interval_seconds=context.refresh_interval, clock=fake_clock)
        lookup = RepeaterLookup(context, client=fake_client, throttle=throttle, logger=mock_logger)
        return UKRepeaterCommand(command_mock_bot, repeater_lookup=lookup)

    def test_refresh_returns_empty_reply(self, refresh_cmd, fake_client):
        assert refresh_cmd.handle("/ukrepeater reload") == ""
        assert fake_client.requested == [UPDATE_URL]

    def test_refresh_ignores_throttle(self, refresh_cmd, fake_client):
        refresh_cmd.handle("/ukrepeater reload")
        refresh_cmd.handle("/ukrepeater re")
        assert fake_client.count(UPDATE_URL) == 2

    def test_refresh_failure(self, refresh_cmd, fake_client):
        fake_client.respond(UPDATE_URL, UnexpectedStatusError(500))
        assert refresh_cmd.handle("/ukrepeater reload") == (
            "There was an issue updating: Unexpected status code received from server"
        )


class TestExecute:
    """Tests for the async entry point."""

    @pytest.mark.asyncio
    async def test_execute_returns_ephemeral_response(self, cmd, fake_client):
        fake_client.respond(f"{TEST_API_URL}/repeater/gb3wr", to_body(create_test_repeater()))
        response = await cmd.execute(CommandArgs("/ukrepeater gb3wr", user_id="u1", channel_id="c1"))
        assert response.response_type == RESPONSE_TYPE_EPHEMERAL
        assert response.text.startswith("Name: GB3WR")

    @pytest.mark.asyncio
    async def test_execute_error_is_reply_text(self, cmd):
        response = await cmd.execute(CommandArgs("/ukrepeater"))
        assert response.text == "No query given, enter a callsign or locator to search for!"

    def test_close_closes_client(self, cmd, fake_client):
        cmd.close()
        assert fake_client.closed is True

    def test_close_logs_refresh_stats(self, cmd, command_mock_bot):
        cmd.handle("/ukrepeater gb3wr")
        cmd.close()
        logged = [call.args[0] for call in command_mock_bot.logger.info.call_args_list]
        assert any("1 sent" in message for message in logged)
