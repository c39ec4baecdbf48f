from gpg_alias.cli import main

main()
