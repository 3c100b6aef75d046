"""Testes para validação canônica de comandos e opções."""

from __future__ import annotations

import pytest

from guildwire.adapters.discord.errors import CommandValidationError
from guildwire.adapters.discord.validators import (
    validate_children,
    validate_description,
    validate_name,
    validate_option,
    validate_options,
)
from guildwire.domain.commands import (
    DEFAULT,
    GLOBAL,
    CommandOption,
    ScopedTo,
    coerce_scope,
    scoped_to,
)
from guildwire.domain.enums import CommandKind, OptionKind


class TestValidateName:
    @pytest.mark.parametrize("name", ["ping", "user-info", "set_prefix", "a" * 32])
    def test_valid_slash_names(self, name: str) -> None:
        validate_name(name)

    @pytest.mark.parametrize("name", ["", "Ping", "with space", "a" * 33])
    def test_invalid_slash_names(self, name: str) -> None:
        with pytest.raises(CommandValidationError):
            validate_name(name)

    def test_context_menu_allows_spaces_and_case(self) -> None:
        validate_name("Report Message", CommandKind.MESSAGE)

    def test_context_menu_length(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_name("x" * 33, CommandKind.USER)


class TestValidateDescription:
    def test_empty_description_rejected(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_description("", "ping")

    def test_too_long_description_rejected(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_description("x" * 101, "ping")


class TestValidateOption:
    def test_string_with_choices(self) -> None:
        validate_option(
            CommandOption("cor", "Cor favorita", choices={"Azul": "blue", "Verde": "green"})
        )

    def test_choices_not_allowed_for_boolean(self) -> None:
        option = CommandOption("flag", "Flag", kind=OptionKind.BOOLEAN, choices={"Sim": "y"})

        with pytest.raises(CommandValidationError):
            validate_option(option)

    def test_choice_value_must_match_kind(self) -> None:
        option = CommandOption("n", "Número", kind=OptionKind.INTEGER, choices={"Um": "1"})

        with pytest.raises(CommandValidationError):
            validate_option(option)

    def test_bool_is_not_integer_choice(self) -> None:
        option = CommandOption("n", "Número", kind=OptionKind.INTEGER, choices={"Um": True})

        with pytest.raises(CommandValidationError):
            validate_option(option)

    def test_range_only_numeric(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_option(CommandOption("s", "Texto", min_value=1))

    def test_min_above_max(self) -> None:
        option = CommandOption("n", "Número", kind=OptionKind.NUMBER, min_value=5, max_value=1)

        with pytest.raises(CommandValidationError):
            validate_option(option)

    def test_length_only_for_string(self) -> None:
        option = CommandOption("n", "Número", kind=OptionKind.INTEGER, max_length=3)

        with pytest.raises(CommandValidationError):
            validate_option(option)

    def test_channel_types_only_for_channel(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_option(CommandOption("s", "Texto", channel_types=(0,)))

    def test_autocomplete_excludes_choices(self) -> None:
        option = CommandOption("s", "Texto", choices={"a": "a"}, autocomplete=True)

        with pytest.raises(CommandValidationError):
            validate_option(option)

    def test_sub_command_kind_rejected(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_option(CommandOption("sub", "Sub", kind=OptionKind.SUB_COMMAND))

    def test_too_many_choices(self) -> None:
        choices = {f"c{i}": f"v{i}" for i in range(26)}

        with pytest.raises(CommandValidationError):
            validate_option(CommandOption("s", "Texto", choices=choices))


class TestValidateOptionsAndChildren:
    def test_duplicate_option_names(self) -> None:
        options = [CommandOption("a", "A"), CommandOption("a", "B")]

        with pytest.raises(CommandValidationError):
            validate_options(options, "cmd")

    def test_too_many_options(self) -> None:
        options = [CommandOption(f"o{i}", "Opção") for i in range(26)]

        with pytest.raises(CommandValidationError):
            validate_options(options, "cmd")

    def test_duplicate_child(self) -> None:
        with pytest.raises(CommandValidationError):
            validate_children("admin", ["ban"], "ban")


class TestOptionPayload:
    def test_payload_omits_unset_constraints(self) -> None:
        payload = CommandOption("alvo", "Usuário", kind=OptionKind.USER, required=False).to_payload()

        assert payload == {"type": 6, "name": "alvo", "description": "Usuário", "required": False}

    def test_payload_with_choices_and_range(self) -> None:
        option = CommandOption(
            "n",
            "Número",
            kind=OptionKind.INTEGER,
            choices={"Um": 1},
            min_value=0,
            max_value=10,
        )

        payload = option.to_payload()

        assert payload["choices"] == [{"name": "Um", "value": 1}]
        assert (payload["min_value"], payload["max_value"]) == (0, 10)


class TestCoerceScope:
    def test_none_is_default(self) -> None:
        assert coerce_scope(None) is DEFAULT

    def test_false_is_global(self) -> None:
        assert coerce_scope(False) is GLOBAL

    def test_ids_are_normalised(self) -> None:
        assert coerce_scope([42, "7"]) == ScopedTo(frozenset({"42", "7"}))

    def test_single_id(self) -> None:
        assert coerce_scope(42) == scoped_to("42")

    def test_empty_list_is_empty_scope(self) -> None:
        assert coerce_scope([]) == ScopedTo(frozenset())

    def test_true_is_ambiguous(self) -> None:
        with pytest.raises(TypeError):
            coerce_scope(True)
