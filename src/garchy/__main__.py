from garchy.main import main

main()
