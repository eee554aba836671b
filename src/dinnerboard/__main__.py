from dinnerboard.cli import main

main()
