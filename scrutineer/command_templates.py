#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Command templates for the clean and build invocations.

A template is an immutable argument vector. Build templates carry a reserved
slot, the token ``{target}``, which is replaced by the target under
assessment each time the template is rendered. Clean templates carry no slot.
"""

import shlex
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import TARGET_PLACEHOLDER, ArgumentError

logger = logging.getLogger(__name__)


def split_command(text: str) -> List[str]:
    """Split a command string into an argument vector.

    Tokens are whitespace-delimited; single- and double-quoted runs belong to
    one token and lose their quote characters. An unterminated quote is
    closed implicitly at end of string. Backslashes and ``#`` have no special
    meaning.

    Args:
        text: Command string, e.g. ``make "my target"``

    Returns:
        Non-empty list of tokens

    Raises:
        ArgumentError: If text contains no tokens
    """
    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    lexer.escape = ""

    tokens: List[str] = []
    while True:
        try:
            token = lexer.get_token()
        except ValueError:
            # Unterminated quote; the lexer has accumulated the rest of the line
            logger.debug("Implicitly closing unterminated quote in %r", text)
            tokens.append(lexer.token)
            break
        if token is None:
            break
        tokens.append(token)

    if not tokens:
        raise ArgumentError(f"empty command: {text!r}")
    return tokens


@dataclass(frozen=True)
class CommandTemplate:
    """Argument vector with an optional reserved target slot.

    Attributes:
        argv: Tokens of the command; TARGET_PLACEHOLDER marks the target slot,
            either as a whole token or inside one such as ``TARGET={target}``
    """

    argv: Tuple[str, ...]

    @classmethod
    def build(cls, text: str) -> "CommandTemplate":
        """Parse a build template; without a slot the target goes last."""
        argv = split_command(text)
        if not any(TARGET_PLACEHOLDER in token for token in argv):
            argv.append(TARGET_PLACEHOLDER)
        return cls(tuple(argv))

    @classmethod
    def clean(cls, text: str) -> "CommandTemplate":
        """Parse a clean template, which must not reference a target."""
        argv = split_command(text)
        if any(TARGET_PLACEHOLDER in token for token in argv):
            raise ArgumentError(f"clean command must not contain {TARGET_PLACEHOLDER}: {text!r}")
        return cls(tuple(argv))

    @property
    def has_target_slot(self) -> bool:
        return any(TARGET_PLACEHOLDER in token for token in self.argv)

    @property
    def program(self) -> str:
        return self.argv[0]

    def render(self, target: Optional[str] = None) -> List[str]:
        """Return the argument vector for one invocation.

        Args:
            target: Target substituted into the reserved slot, if any

        Raises:
            ValueError: If the template has a slot and no target was given
        """
        if not self.has_target_slot:
            return list(self.argv)
        if target is None:
            raise ValueError("template requires a target")
        return [token.replace(TARGET_PLACEHOLDER, target) for token in self.argv]

    def __str__(self) -> str:
        return shlex.join(self.argv)
