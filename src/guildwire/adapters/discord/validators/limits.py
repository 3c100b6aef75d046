"""Limites e constantes para validação local de comandos e mensagens Discord.

Apenas restrições estruturais das próprias operações; limites de
quantidade por mensagem (linhas, itens por linha, tamanho de conteúdo)
ficam a cargo da API remota.
"""

import re

# Comandos de aplicação
MAX_COMMAND_NAME_LENGTH = 32
MAX_DESCRIPTION_LENGTH = 100
MAX_OPTIONS_PER_COMMAND = 25
MAX_CHOICES_PER_OPTION = 25
MAX_CHOICE_NAME_LENGTH = 100
MAX_STRING_OPTION_LENGTH = 6000

# Nomes de comandos slash/opções: minúsculos, sem espaços
SLASH_NAME_PATTERN = re.compile(r"^[-_\w]{1,32}$")

# fetch_messages
MIN_FETCH_LIMIT = 1
MAX_FETCH_LIMIT = 100
